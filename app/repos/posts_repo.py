import logging
from pathlib import Path
from typing import List, Optional

from app.exceptions import (
    FrontmatterValidationError,
    NoValidPostsError,
    PostNotFoundError,
)
from app.schemas.blog import PostEntry
from app.services.content_discovery import (
    DEFAULT_ENTRY_FILENAME,
    assert_posts_root_exists,
    format_post_path,
    list_post_slugs,
    normalize_slug,
    resolve_post_file_path,
)
from app.services.post_parser import parse_post
from app.services.snapshot import load_snapshot
from app.settings import Settings
from app.utils import content_sha, settle_all

logger = logging.getLogger(__name__)


class FilesystemPostsRepo:
    """Reads posts straight from the content checkout."""

    def __init__(
        self,
        posts_root: Path,
        *,
        content_dir: str,
        posts_root_dir: str,
        entry_filename: str = DEFAULT_ENTRY_FILENAME,
    ):
        self.posts_root = Path(posts_root)
        self.content_dir = content_dir
        self.posts_root_dir = posts_root_dir
        self.entry_filename = entry_filename

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilesystemPostsRepo":
        return cls(
            settings.posts_root,
            content_dir=settings.CONTENT_DIR,
            posts_root_dir=settings.POSTS_ROOT_DIR,
            entry_filename=settings.POST_ENTRY_FILENAME,
        )

    @property
    def expected_layout(self) -> str:
        return f"{self.content_dir}/{self.posts_root_dir}/<slug>/{self.entry_filename}"

    def format_path(self, slug: str) -> str:
        return format_post_path(
            self.content_dir, self.posts_root_dir, slug, self.entry_filename
        )

    def load_entries(self) -> List[PostEntry]:
        assert_posts_root_exists(self.posts_root, self.expected_layout)
        slugs = list_post_slugs(
            self.posts_root, self.entry_filename, expected_layout=self.expected_layout
        )

        entries = []
        for outcome in settle_all(self.read_entry, slugs):
            if outcome.ok:
                entries.append(outcome.value)
                continue

            path = self.format_path(outcome.item)
            if isinstance(outcome.error, FrontmatterValidationError):
                issues = [issue.as_dict() for issue in outcome.error.issues]
                logger.warning(
                    f"Skipping post {outcome.item} due to invalid frontmatter "
                    f"(path={path}, issues={issues})"
                )
            else:
                logger.warning(
                    f"Skipping post {outcome.item} due to unexpected error "
                    f"(path={path}, error={outcome.error})"
                )

        if not entries:
            raise NoValidPostsError(
                "No valid posts generated. Check content and frontmatter."
            )
        return entries

    def read_entry(self, slug: str) -> PostEntry:
        safe_slug = normalize_slug(slug.removeprefix("/"))
        file_path = resolve_post_file_path(
            self.posts_root, safe_slug, self.entry_filename
        )
        raw = file_path.read_text(encoding="utf-8")
        parsed = parse_post(raw)
        return PostEntry(
            slug=safe_slug,
            path=self.format_path(safe_slug),
            sha=content_sha(raw),
            frontmatter=parsed.frontmatter,
            content=parsed.content,
        )

    def get_entry(self, slug: str) -> PostEntry:
        try:
            return self.read_entry(slug)
        except FileNotFoundError as e:
            raise PostNotFoundError(slug, self.format_path(slug)) from e


class SnapshotPostsRepo:
    """Reads posts from the file written by scripts/generate_content.py."""

    def __init__(self, snapshot_path: Path, *, content_dir: str = "", posts_root_dir: str = ""):
        self.snapshot_path = Path(snapshot_path)
        self.content_dir = content_dir
        self.posts_root_dir = posts_root_dir

    @classmethod
    def from_settings(cls, settings: Settings) -> "SnapshotPostsRepo":
        return cls(
            settings.SNAPSHOT_PATH,
            content_dir=settings.CONTENT_DIR,
            posts_root_dir=settings.POSTS_ROOT_DIR,
        )

    def load_entries(self) -> List[PostEntry]:
        return load_snapshot(self.snapshot_path)

    def get_entry(self, slug: str) -> PostEntry:
        found: Optional[PostEntry] = next(
            (entry for entry in self.load_entries() if entry.slug == slug), None
        )
        if found is None:
            raise PostNotFoundError(
                slug, format_post_path(self.content_dir, self.posts_root_dir, slug)
            )
        return found
