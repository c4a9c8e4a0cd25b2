import logging
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from app.exceptions import (
    FrontmatterIssue,
    FrontmatterValidationError,
    InvalidSlugError,
    PostNotFoundError,
)
from app.schemas.blog import PostEntry
from app.services.cache import (
    DEFAULT_TTL_SECONDS,
    POSTS_TAG,
    TagCache,
    cached_call,
    post_tag,
)
from app.services.content_discovery import normalize_slug

logger = logging.getLogger(__name__)

LookupStatus = Literal["found", "not_found", "invalid"]


@dataclass(frozen=True)
class PostLookup:
    """Outcome of a single-post read.

    ``not_found`` and ``invalid`` both mean "no post" to readers; ``issues``
    is only filled for ``invalid``.
    """

    slug: str
    status: LookupStatus
    post: Optional[PostEntry] = None
    issues: Tuple[FrontmatterIssue, ...] = ()

    @property
    def found(self) -> bool:
        return self.status == "found"


class PostsService:
    def __init__(self, repo, cache: TagCache, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        self.repo = repo
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def list_posts(self) -> List[PostEntry]:
        """Every successfully parsed post, in discovery order."""
        entries = cached_call(
            self.cache,
            "posts:list",
            self.repo.load_entries,
            tags=[POSTS_TAG],
            ttl=self.ttl_seconds,
        )
        return list(entries)

    def list_public_posts(self) -> List[PostEntry]:
        """Public posts, newest first; undated posts go last in input order."""
        public = [p for p in self.list_posts() if p.frontmatter.access == "public"]
        dated = [p for p in public if p.frontmatter.date is not None]
        undated = [p for p in public if p.frontmatter.date is None]
        dated.sort(key=lambda p: p.frontmatter.date, reverse=True)
        return dated + undated

    def get_post_by_slug(self, slug: str) -> PostLookup:
        try:
            slug = normalize_slug(slug.removeprefix("/"))
        except InvalidSlugError as e:
            logger.error(f"Failed to fetch post: {slug} ({e})")
            return PostLookup(slug=slug, status="not_found")

        cached = self.cache.get(f"post:{slug}")
        if cached is not None:
            return PostLookup(slug=slug, status="found", post=cached)

        try:
            entry = self.repo.get_entry(slug)
        except FrontmatterValidationError as e:
            issues = [issue.as_dict() for issue in e.issues]
            logger.warning(f"Invalid frontmatter for post {slug}: {issues}")
            return PostLookup(slug=slug, status="invalid", issues=tuple(e.issues))
        except (PostNotFoundError, InvalidSlugError) as e:
            logger.error(f"Failed to fetch post: {slug} ({e})")
            return PostLookup(slug=slug, status="not_found")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read post {slug}: {e}")
            return PostLookup(slug=slug, status="not_found")

        self.cache.set(
            f"post:{slug}",
            entry,
            tags=[POSTS_TAG, post_tag(slug)],
            ttl=self.ttl_seconds,
        )
        return PostLookup(slug=slug, status="found", post=entry)

    def invalidate(self, tag: str) -> int:
        return self.cache.invalidate(tag)
