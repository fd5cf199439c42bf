"""Post builder: turns one source document into a canonical Post record.

Derives whatever the frontmatter leaves out: slug, excerpt, read time and
dates. Pure transform; writing artifacts is the orchestrator's job.
"""

import html
import math
import os
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from blog.config import Settings, get_settings
from blog.models.post import SEO, Post
from blog.services.build.parser import parse_document
from blog.services.build.renderer import render_markdown

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[\"'`*+~.()!:@]")
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")

ELLIPSIS = "..."


class PostValidationError(ValueError):
    """Raised when a document cannot become a post (skip it, keep going)."""


class MissingTitleError(PostValidationError):
    """Raised when a document's frontmatter has no title."""


@dataclass(frozen=True)
class DocumentTimestamps:
    """Filesystem dates used when the frontmatter has none."""

    created: date
    modified: date

    @classmethod
    def from_stat(cls, stat: os.stat_result) -> "DocumentTimestamps":
        # st_birthtime only exists on some platforms (macOS, BSD, newer Linux)
        created_ts = getattr(stat, "st_birthtime", stat.st_ctime)
        return cls(
            created=datetime.fromtimestamp(created_ts, tz=timezone.utc).date(),
            modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).date(),
        )


def slugify(text: str) -> str:
    """URL-safe slug: lowercase ASCII, punctuation dropped, runs collapsed to '-'."""
    folded = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode()
    folded = _SLUG_STRIP_RE.sub("", folded.lower())
    return _SLUG_SEPARATOR_RE.sub("-", folded).strip("-")


def strip_tags(content: str) -> str:
    """Plain text of an HTML fragment, whitespace collapsed."""
    text = html.unescape(_TAG_RE.sub("", content))
    return _WHITESPACE_RE.sub(" ", text).strip()


def generate_excerpt(content: str, max_length: int = 160) -> str:
    """Plain-text excerpt of rendered HTML.

    Cuts at the last sentence end when it falls in the final 20% of
    *max_length*, otherwise at the last word boundary with an ellipsis.
    """
    plain_text = strip_tags(content)
    if len(plain_text) <= max_length:
        return plain_text

    truncated = plain_text[:max_length]
    last_sentence = truncated.rfind(".")
    if last_sentence > max_length * 0.8:
        return truncated[: last_sentence + 1]

    last_space = truncated.rfind(" ")
    if last_space == -1:
        # One unbroken word longer than the limit
        return truncated + ELLIPSIS
    return truncated[:last_space] + ELLIPSIS


def calculate_read_time(body: str, words_per_minute: int = 200) -> int:
    """Minutes to read the raw markdown *body*, rounded up, at least 1."""
    words = len(body.split())
    return max(1, math.ceil(words / words_per_minute))


def _coerce_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise PostValidationError(f"Invalid {field_name}: {value!r}")


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value if item is not None]


def build_post(
    raw: str,
    timestamps: DocumentTimestamps,
    source: str = "<string>",
    settings: Settings | None = None,
) -> Post:
    """Build a Post from a raw markdown document.

    Args:
        raw: Full document text, frontmatter included.
        timestamps: Fallback dates when the frontmatter has none.
        source: Document identity used in error messages.
        settings: Defaults for author, category, excerpt and read time.

    Raises:
        MissingTitleError: The frontmatter has no title.
        PostValidationError: Slug, dates or read time are unusable.
        yaml.YAMLError: The frontmatter block is malformed.
    """
    settings = settings or get_settings()
    document = parse_document(raw)
    meta = document.metadata

    title = str(meta.get("title") or "").strip()
    if not title:
        raise MissingTitleError(f"{source} missing title in frontmatter")

    content = render_markdown(document.body)

    slug = slugify(meta.get("slug") or title)
    if not slug:
        raise PostValidationError(f"{source} produced an empty slug")

    read_time = meta.get("readTime") or calculate_read_time(
        document.body, settings.words_per_minute
    )
    if isinstance(read_time, bool) or not isinstance(read_time, int) or read_time < 1:
        raise PostValidationError(f"{source} has invalid readTime: {read_time!r}")

    summary = str(
        meta.get("summary")
        or meta.get("excerpt")
        or generate_excerpt(content, settings.excerpt_max_length)
    )

    publish_date = (
        _coerce_date(meta["date"], "date") if meta.get("date") else timestamps.created
    )
    last_modified = (
        _coerce_date(meta["lastModified"], "lastModified")
        if meta.get("lastModified")
        else timestamps.modified
    )

    tags = _as_list(meta.get("tags"))

    return Post(
        id=slug,
        slug=slug,
        title=title,
        publish_date=publish_date,
        last_modified=last_modified,
        author=str(meta.get("author") or settings.default_author),
        summary=summary,
        tags=tags,
        category=str(meta.get("category") or settings.default_category),
        read_time=read_time,
        featured=bool(meta.get("featured", False)),
        published=meta.get("published") is not False,
        content=content,
        seo=SEO(
            meta_description=str(meta.get("description") or summary),
            keywords=_as_list(meta.get("keywords")) or tags,
        ),
    )
