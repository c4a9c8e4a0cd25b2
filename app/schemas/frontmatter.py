import datetime
from typing import Any, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.exceptions import FrontmatterIssue, FrontmatterValidationError

AccessLevel = Literal["public", "unlisted", "private", "protected"]
ACCESS_LEVELS = ("public", "unlisted", "private", "protected")
DEFAULT_ACCESS: AccessLevel = "private"


class PostFrontmatter(BaseModel):
    """Validated post metadata.

    Every field validator runs in ``before`` mode so that the messages below
    reach authors unchanged, and so pydantic reports all bad fields at once.
    The protected/password rule only runs once the individual fields are valid.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    access: AccessLevel = DEFAULT_ACCESS
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    topics: Optional[List[str]] = None
    date: Optional[datetime.datetime] = None
    password: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _check_title(cls, value: Any) -> str:
        if value is None:
            raise PydanticCustomError("missing", "title is required")
        if not isinstance(value, str):
            raise PydanticCustomError("string_type", "title must be a string")
        if not value.strip():
            raise PydanticCustomError("string_empty", "title must not be empty")
        return value

    @field_validator("access", mode="before")
    @classmethod
    def _check_access(cls, value: Any) -> str:
        if not isinstance(value, str) or value not in ACCESS_LEVELS:
            raise PydanticCustomError(
                "access_literal",
                "access must be one of: {choices}",
                {"choices": ", ".join(ACCESS_LEVELS)},
            )
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> Optional[str]:
        if value is not None and not isinstance(value, str):
            raise PydanticCustomError("string_type", "description must be a string")
        return value

    @field_validator("thumbnail", mode="before")
    @classmethod
    def _check_thumbnail(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError("string_type", "thumbnail must be a string")
        if not value.startswith(("http://", "https://", "/")):
            raise PydanticCustomError("url_format", "thumbnail must be a URL")
        return value

    @field_validator("topics", mode="before")
    @classmethod
    def _check_topics(cls, value: Any) -> Optional[List[str]]:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise PydanticCustomError("array_type", "topics must be an array")
        if not all(isinstance(item, str) for item in value):
            raise PydanticCustomError(
                "array_item_type", "topics must be an array of strings"
            )
        return list(value)

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> Optional[datetime.datetime]:
        if value is None:
            return None
        return coerce_date(value)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError("string_type", "password must be a string")
        if not value:
            raise PydanticCustomError("string_empty", "password must not be empty")
        return value

    @model_validator(mode="after")
    def _check_protected_password(self) -> "PostFrontmatter":
        if self.access == "protected" and not self.password:
            raise PydanticCustomError(
                "password_required", 'password is required when access is "protected"'
            )
        return self


def coerce_date(value: Any) -> datetime.datetime:
    """Turn a YAML date, datetime or ISO-8601 string into an aware UTC datetime."""
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        # YAML loads bare dates (2024-01-01) as date objects
        parsed = datetime.datetime.combine(value, datetime.time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            raise PydanticCustomError(
                "date_format", "date must be a valid ISO-8601 date"
            ) from None
    else:
        raise PydanticCustomError("date_type", "date must be an ISO-8601 string")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc)


def validate_frontmatter(data: Any) -> PostFrontmatter:
    """Validate a raw frontmatter mapping.

    Raises:
        FrontmatterValidationError: with one issue per violated field.
    """
    if not isinstance(data, Mapping):
        raise FrontmatterValidationError(
            [FrontmatterIssue("frontmatter", "frontmatter must be a mapping")]
        )
    try:
        return PostFrontmatter.model_validate(dict(data))
    except ValidationError as e:
        raise FrontmatterValidationError(issues_from_validation_error(e)) from e


def issues_from_validation_error(error: ValidationError) -> List[FrontmatterIssue]:
    issues = []
    for detail in error.errors():
        loc = detail.get("loc") or ()
        if loc:
            field = ".".join(str(part) for part in loc)
        elif detail.get("type") == "password_required":
            field = "password"
        else:
            field = "frontmatter"

        if detail.get("type") == "missing":
            message = f"{field} is required"
        else:
            message = detail.get("msg", "invalid value")
        issues.append(FrontmatterIssue(field, message))
    return issues
