import logging
from pathlib import Path
from typing import List

from app.exceptions import ContentRootNotFoundError, InvalidSlugError, NoPostsFoundError
from app.utils import settle_all

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_FILENAME = "index.md"


def normalize_slug(slug: str) -> str:
    """Trim a slug and reject anything that could name another directory."""
    cleaned = slug.strip()
    if (
        not cleaned
        or cleaned in (".", "..")
        or "/" in cleaned
        or "\\" in cleaned
    ):
        raise InvalidSlugError(slug)
    return cleaned


def format_post_path(
    content_dir: str,
    posts_root_dir: str,
    slug: str,
    entry_filename: str = DEFAULT_ENTRY_FILENAME,
) -> str:
    """Logical posix location of a post, used in logs and snapshots."""
    parts = [content_dir.rstrip("/")]
    parts += [part.strip("/") for part in (posts_root_dir, slug, entry_filename)]
    return "/".join(parts)


def assert_posts_root_exists(posts_root: Path, expected_layout: str) -> None:
    if not Path(posts_root).is_dir():
        raise ContentRootNotFoundError(posts_root, expected_layout)


def list_post_slugs(
    posts_root: Path,
    entry_filename: str = DEFAULT_ENTRY_FILENAME,
    *,
    expected_layout: str = f"<content-dir>/<posts-root-dir>/<slug>/{DEFAULT_ENTRY_FILENAME}",
) -> List[str]:
    """Return the sorted slugs under ``posts_root`` that contain an entry file.

    Hidden directories are ignored. Directories with an unusable name or
    without the entry file are skipped with a warning.

    Raises:
        NoPostsFoundError: when no slug qualifies.
    """
    posts_root = Path(posts_root)
    candidates = []
    for child in posts_root.iterdir():
        if not child.is_dir() or child.name.startswith("."):
            continue
        try:
            candidates.append(normalize_slug(child.name))
        except InvalidSlugError:
            logger.warning(f"Skipping directory with invalid slug: {child}")

    def has_entry(slug: str) -> bool:
        return (posts_root / slug / entry_filename).is_file()

    found = []
    for outcome in settle_all(has_entry, candidates):
        file_path = posts_root / outcome.item / entry_filename
        if outcome.ok and outcome.value:
            found.append(outcome.item)
        elif outcome.ok:
            logger.warning(f"Skipping directory without {entry_filename}: {file_path}")
        else:
            logger.warning(f"Skipping directory {file_path}: {outcome.error}")

    if not found:
        raise NoPostsFoundError(posts_root, expected_layout)

    return sorted(found)


def resolve_post_file_path(
    posts_root: Path, slug: str, entry_filename: str = DEFAULT_ENTRY_FILENAME
) -> Path:
    """Absolute path of a slug's entry file, guaranteed to sit under ``posts_root``.

    Raises:
        InvalidSlugError: if the slug is malformed or resolves outside the root.
    """
    safe_slug = normalize_slug(slug.removeprefix("/"))
    root = Path(posts_root).resolve()
    candidate = (root / safe_slug / entry_filename).resolve()

    # resolved path must stay under the root, symlinks included
    if not candidate.is_relative_to(root) or candidate == root:
        raise InvalidSlugError(slug)
    return candidate
