"""Password gate for ``access: protected`` posts.

A reader who submits the right password gets a cookie holding the SHA-256 of
the configured password, scoped to that post's slug. Presenting a cookie with
the expected hash is treated as proof of the password until it expires.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple

from app.schemas.blog import PostEntry, ProtectedPostState

logger = logging.getLogger(__name__)

COOKIE_MAX_AGE_SECONDS = 60 * 60 * 12

MISCONFIGURED_MESSAGE = 'Posts with access: "protected" must set a password.'
MISSING_PASSWORD_MESSAGE = "Please enter the password."
WRONG_PASSWORD_MESSAGE = "The password is incorrect."


@dataclass(frozen=True)
class AccessCredential:
    name: str
    value: str
    max_age: int = COOKIE_MAX_AGE_SECONDS
    path: str = "/"
    httponly: bool = True
    samesite: str = "lax"
    secure: bool = False


def protected_cookie_name(slug: str) -> str:
    return f"protected-post-{slug}"


def hash_password(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _granted(post: PostEntry) -> ProtectedPostState:
    return ProtectedPostState(status="granted", content=post.content)


def _misconfigured(post: PostEntry) -> ProtectedPostState:
    logger.error(f"Protected post {post.slug} has no password configured ({post.path})")
    return ProtectedPostState(status="misconfigured", error=MISCONFIGURED_MESSAGE)


def has_protected_access(cookie_value: Optional[str], expected_hash: str) -> bool:
    if not cookie_value:
        return False
    return secrets.compare_digest(
        cookie_value.encode("utf-8"), expected_hash.encode("utf-8")
    )


def load_protected_post(
    post: PostEntry, cookie_value: Optional[str] = None
) -> ProtectedPostState:
    """Release the body if the post is open or the cookie proves the password."""
    if post.frontmatter.access != "protected":
        return _granted(post)

    if not post.frontmatter.password:
        return _misconfigured(post)

    expected_hash = hash_password(post.frontmatter.password)
    if not has_protected_access(cookie_value, expected_hash):
        return ProtectedPostState(status="locked")

    return _granted(post)


def verify_protected_post_password(
    post: PostEntry,
    password,
    *,
    secure: bool = False,
    max_age: int = COOKIE_MAX_AGE_SECONDS,
) -> Tuple[ProtectedPostState, Optional[AccessCredential]]:
    """Check a submitted password.

    Returns the resulting state and, only on success, the credential the
    caller should store as a cookie.
    """
    if post.frontmatter.access != "protected":
        return _granted(post), None

    if not post.frontmatter.password:
        return _misconfigured(post), None

    if not isinstance(password, str) or not password:
        return ProtectedPostState(status="denied", error=MISSING_PASSWORD_MESSAGE), None

    expected_hash = hash_password(post.frontmatter.password)
    if not secrets.compare_digest(hash_password(password), expected_hash):
        logger.info(f"Rejected password for protected post {post.slug}")
        return ProtectedPostState(status="denied", error=WRONG_PASSWORD_MESSAGE), None

    credential = AccessCredential(
        name=protected_cookie_name(post.slug),
        value=expected_hash,
        max_age=max_age,
        secure=secure,
    )
    return _granted(post), credential
