import hashlib
import logging

import pytest

from app.exceptions import (
    ContentRootNotFoundError,
    FrontmatterValidationError,
    InvalidSlugError,
    NoPostsFoundError,
    NoValidPostsError,
    PostNotFoundError,
)
from app.repos.posts_repo import FilesystemPostsRepo, SnapshotPostsRepo
from app.services.snapshot import write_snapshot
from app.settings import Settings
from tests.conftest import make_entry, write_post

VALID = """
---
title: {title}
access: public
date: {date}
---
Body of {title}.
"""


def make_repo(posts_root):
    return FilesystemPostsRepo(
        posts_root, content_dir="my-blog-contents", posts_root_dir="external-posts"
    )


def test_load_entries_builds_entries_in_slug_order(posts_root):
    write_post(posts_root, "b-post", VALID.format(title="B", date="2024-02-01"))
    write_post(posts_root, "a-post", VALID.format(title="A", date="2024-01-01"))

    entries = make_repo(posts_root).load_entries()

    assert [e.slug for e in entries] == ["a-post", "b-post"]
    first = entries[0]
    raw = (posts_root / "a-post" / "index.md").read_text(encoding="utf-8")
    assert first.path == "my-blog-contents/external-posts/a-post/index.md"
    assert first.sha == hashlib.sha1(raw.encode("utf-8")).hexdigest()
    assert first.content == "Body of A.\n"
    assert first.frontmatter.title == "A"


def test_load_entries_tolerates_invalid_posts(posts_root, caplog):
    write_post(posts_root, "one", VALID.format(title="One", date="2024-01-01"))
    write_post(posts_root, "two", "---\naccess: public\n---\nno title\n")
    write_post(posts_root, "three", VALID.format(title="Three", date="2024-03-01"))

    with caplog.at_level(logging.WARNING):
        entries = make_repo(posts_root).load_entries()

    assert [e.slug for e in entries] == ["one", "three"]
    assert "two" in caplog.text
    assert "title is required" in caplog.text


def test_load_entries_logs_unexpected_errors(posts_root, caplog):
    write_post(posts_root, "ok", VALID.format(title="Ok", date="2024-01-01"))
    bad = write_post(posts_root, "binary", "placeholder")
    bad.write_bytes(b"\xff\xfe\x00garbage")

    with caplog.at_level(logging.WARNING):
        entries = make_repo(posts_root).load_entries()

    assert [e.slug for e in entries] == ["ok"]
    assert "unexpected error" in caplog.text


def test_load_entries_fails_when_every_post_is_invalid(posts_root):
    write_post(posts_root, "bad", "no frontmatter here\n")

    with pytest.raises(NoValidPostsError):
        make_repo(posts_root).load_entries()


def test_load_entries_fails_without_posts_root(tmp_path):
    repo = make_repo(tmp_path / "missing")

    with pytest.raises(ContentRootNotFoundError) as exc_info:
        repo.load_entries()
    assert "my-blog-contents/external-posts/<slug>/index.md" in str(exc_info.value)


def test_load_entries_fails_without_slugs(posts_root):
    with pytest.raises(NoPostsFoundError):
        make_repo(posts_root).load_entries()


def test_get_entry_reads_single_post(posts_root):
    write_post(posts_root, "hello", VALID.format(title="Hello", date="2024-01-01"))

    entry = make_repo(posts_root).get_entry("hello")

    assert entry.slug == "hello"
    assert entry.frontmatter.access == "public"


def test_get_entry_missing_raises_not_found(posts_root):
    with pytest.raises(PostNotFoundError) as exc_info:
        make_repo(posts_root).get_entry("nope")
    assert exc_info.value.path == "my-blog-contents/external-posts/nope/index.md"


def test_get_entry_rejects_traversal(posts_root):
    with pytest.raises(InvalidSlugError):
        make_repo(posts_root).get_entry("../../etc/passwd")


def test_get_entry_invalid_frontmatter_raises_validation_error(posts_root):
    write_post(posts_root, "bad", "---\ntitle: x\ntopics: python\n---\n")

    with pytest.raises(FrontmatterValidationError) as exc_info:
        make_repo(posts_root).get_entry("bad")
    assert exc_info.value.issues[0].field == "topics"


def test_from_settings_uses_configured_layout(tmp_path):
    settings = Settings(
        CONTENT_DIR=str(tmp_path / "content"),
        POSTS_ROOT_DIR="posts",
        POST_ENTRY_FILENAME="post.md",
    )

    repo = FilesystemPostsRepo.from_settings(settings)

    assert repo.posts_root == (tmp_path / "content" / "posts").resolve()
    assert repo.entry_filename == "post.md"


def test_snapshot_repo_reads_generated_file(tmp_path):
    path = tmp_path / "posts.json"
    write_snapshot([make_entry("a", content="A"), make_entry("b")], path)
    repo = SnapshotPostsRepo(path, content_dir="c", posts_root_dir="p")

    assert [e.slug for e in repo.load_entries()] == ["a", "b"]
    assert repo.get_entry("a").content == "A"
    with pytest.raises(PostNotFoundError) as exc_info:
        repo.get_entry("zzz")
    assert exc_info.value.path == "c/p/zzz/index.md"
