"""Build-time snapshot of every parsed post.

The generator script writes this file before deploy so that production can
serve posts without the content repository on disk.
"""

import datetime
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from app.exceptions import NoValidPostsError, SnapshotNotFoundError
from app.schemas.blog import PostEntry

logger = logging.getLogger(__name__)


def build_snapshot(settings) -> List[PostEntry]:
    """Parse every post under the configured content root.

    Raises:
        ContentRootNotFoundError: if the posts root is missing.
        NoValidPostsError: if no post parses.
    """
    from app.repos.posts_repo import FilesystemPostsRepo

    repo = FilesystemPostsRepo.from_settings(settings)
    return repo.load_entries()


def serialize_entries(
    entries: Iterable[PostEntry], generated_at: Optional[datetime.datetime] = None
) -> dict:
    generated_at = generated_at or datetime.datetime.now(datetime.timezone.utc)
    return {
        "generatedAt": generated_at.isoformat(),
        "posts": [
            entry.model_dump(mode="json", exclude_none=True) for entry in entries
        ],
    }


def write_snapshot(
    entries: Iterable[PostEntry],
    path: Path,
    *,
    generated_at: Optional[datetime.datetime] = None,
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = serialize_entries(entries, generated_at)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")
    return path


def load_snapshot(path: Path) -> List[PostEntry]:
    """Read the snapshot back, restoring dates to datetimes.

    Raises:
        SnapshotNotFoundError: if the file does not exist.
        NoValidPostsError: if it holds no posts.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise SnapshotNotFoundError(path) from e

    entries = []
    for raw in payload.get("posts") or []:
        try:
            entries.append(PostEntry.model_validate(raw))
        except ValidationError as e:
            logger.warning(
                f"Skipping snapshot entry {raw.get('slug', 'unknown')}: {e.error_count()} errors"
            )

    if not entries:
        raise NoValidPostsError(
            f"No posts found in snapshot {path}. "
            'Run "python -m scripts.generate_content" before building.'
        )
    return entries
