import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.frontmatter import AccessLevel, PostFrontmatter


class PostEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    path: str
    sha: str
    frontmatter: PostFrontmatter
    content: str


class PublicFrontmatter(BaseModel):
    """Frontmatter as exposed over the API (never carries the password)."""

    title: str
    access: AccessLevel
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    topics: Optional[List[str]] = None
    date: Optional[datetime.datetime] = None

    @classmethod
    def from_frontmatter(cls, frontmatter: PostFrontmatter) -> "PublicFrontmatter":
        return cls(**frontmatter.model_dump(exclude={"password"}))


class PostSummary(BaseModel):
    slug: str
    path: str
    sha: str
    frontmatter: PublicFrontmatter

    @classmethod
    def from_entry(cls, entry: PostEntry) -> "PostSummary":
        return cls(
            slug=entry.slug,
            path=entry.path,
            sha=entry.sha,
            frontmatter=PublicFrontmatter.from_frontmatter(entry.frontmatter),
        )


AccessStatus = Literal["granted", "locked", "denied", "misconfigured"]


class ProtectedPostState(BaseModel):
    status: AccessStatus
    error: Optional[str] = None
    content: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == "granted"


class PostDetail(PostSummary):
    state: ProtectedPostState


class PasswordSubmission(BaseModel):
    password: Optional[str] = None


class RevalidateRequest(BaseModel):
    tag: str


class RevalidateResult(BaseModel):
    tag: str
    evicted: int
