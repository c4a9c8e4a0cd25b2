from dataclasses import dataclass
from typing import List, Optional, Sequence


class ContentError(Exception):
    """Base class for content ingestion failures."""


class ContentRootNotFoundError(ContentError):
    def __init__(self, root, expected_layout: str):
        super().__init__(
            f"Posts root not found: {root}. "
            f'Did you fetch the content repo? Expected "{expected_layout}".'
        )
        self.root = root


class NoPostsFoundError(ContentError):
    def __init__(self, root, expected_layout: str):
        super().__init__(f'No posts found in {root}. Expected "{expected_layout}".')
        self.root = root


class NoValidPostsError(ContentError):
    pass


class SnapshotNotFoundError(ContentError):
    def __init__(self, path):
        super().__init__(
            f"Snapshot not found: {path}. "
            'Run "python -m scripts.generate_content" before starting in snapshot mode.'
        )
        self.path = path


class InvalidSlugError(ContentError):
    def __init__(self, slug: str):
        super().__init__(f"Invalid slug: {slug}")
        self.slug = slug


class PostNotFoundError(ContentError):
    def __init__(self, slug: str, path: Optional[str] = None):
        super().__init__(f"Post not found: {slug}")
        self.slug = slug
        self.path = path


@dataclass(frozen=True)
class FrontmatterIssue:
    field: str
    message: str

    def __str__(self):
        return f"{self.field}: {self.message}"

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class FrontmatterValidationError(ContentError):
    """Raised with every frontmatter problem found, not just the first."""

    def __init__(self, issues: Sequence[FrontmatterIssue]):
        self.issues: List[FrontmatterIssue] = list(issues)
        summary = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid frontmatter: {summary}")
