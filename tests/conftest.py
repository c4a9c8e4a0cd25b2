import textwrap
from pathlib import Path

import pytest

from app.exceptions import PostNotFoundError
from app.schemas.blog import PostEntry
from app.schemas.frontmatter import PostFrontmatter
from app.services.cache import InMemoryTagCache


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRepo:
    """
    Minimal posts repo stand-in used in service and router tests.
    `errors` maps slugs to the exception get_entry should raise.
    """

    def __init__(self, entries, errors=None):
        self.entries = list(entries)
        self.errors = errors or {}
        self.load_calls = 0
        self.get_calls = []

    def load_entries(self):
        self.load_calls += 1
        return list(self.entries)

    def get_entry(self, slug):
        self.get_calls.append(slug)
        if slug in self.errors:
            raise self.errors[slug]
        for entry in self.entries:
            if entry.slug == slug:
                return entry
        raise PostNotFoundError(slug)


def make_entry(slug: str, content: str = "body", **frontmatter) -> PostEntry:
    frontmatter.setdefault("title", slug.replace("-", " ").title())
    return PostEntry(
        slug=slug,
        path=f"my-blog-contents/external-posts/{slug}/index.md",
        sha=f"sha-{slug}",
        frontmatter=PostFrontmatter.model_validate(frontmatter),
        content=content,
    )


def write_post(root: Path, slug: str, text: str, filename: str = "index.md") -> Path:
    post_dir = Path(root) / slug
    post_dir.mkdir(parents=True, exist_ok=True)
    path = post_dir / filename
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryTagCache(clock=clock)


@pytest.fixture
def posts_root(tmp_path):
    root = tmp_path / "my-blog-contents" / "external-posts"
    root.mkdir(parents=True)
    return root
