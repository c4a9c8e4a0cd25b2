import logging
import re
from typing import NamedTuple

import yaml
from frontmatter.default_handlers import YAMLHandler

from app.exceptions import FrontmatterIssue, FrontmatterValidationError
from app.schemas.frontmatter import PostFrontmatter, validate_frontmatter

logger = logging.getLogger(__name__)

_handler = YAMLHandler()

# opening and closing markers each occupy exactly one line
_FRONTMATTER_BLOCK = re.compile(
    r"\A-{3,}[ \t]*\r?\n(?P<fm>.*?)^-{3,}[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class ParsedPost(NamedTuple):
    frontmatter: PostFrontmatter
    content: str


def parse_post(raw: str) -> ParsedPost:
    """Split a post into validated frontmatter and its markdown body.

    The body is returned as written, minus the line break that ends the
    closing ``---`` marker.

    Raises:
        FrontmatterValidationError: if the block is missing, not YAML, or invalid.
    """
    text = raw.lstrip("\ufeff")

    match = _FRONTMATTER_BLOCK.match(text) if _handler.detect(text) else None
    if match is None:
        raise FrontmatterValidationError(
            [FrontmatterIssue("frontmatter", "missing frontmatter block")]
        )

    try:
        metadata = _handler.load(match.group("fm"))
    except yaml.YAMLError as e:
        raise FrontmatterValidationError(
            [FrontmatterIssue("frontmatter", f"frontmatter is not valid YAML: {e}")]
        ) from e

    if metadata is None:
        metadata = {}

    frontmatter = validate_frontmatter(metadata)
    return ParsedPost(frontmatter=frontmatter, content=text[match.end():])
