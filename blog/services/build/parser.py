"""Frontmatter parsing: splits a raw post into metadata and markdown body."""

from dataclasses import dataclass, field
from typing import Any

import frontmatter


@dataclass
class ParsedDocument:
    """A source document split into its frontmatter and body."""

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def parse_document(raw: str) -> ParsedDocument:
    """Split *raw* into YAML frontmatter and markdown body.

    A document without a frontmatter block yields empty metadata. Malformed
    YAML propagates as ``yaml.YAMLError`` so the caller can report the file.
    """
    post = frontmatter.loads(raw)
    return ParsedDocument(metadata=dict(post.metadata), body=post.content)
