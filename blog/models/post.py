"""Post data models.

Field names are snake_case in Python; the JSON artifacts use the camelCase
aliases (``publishDate``, ``readTime``, ``metaDescription`` ...) so that the
files stay compatible with the browser scripts that consume them.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_artifact(self) -> dict:
        """Return the JSON-ready dict written to disk."""
        return self.model_dump(mode="json", by_alias=True)


class SEO(_ArtifactModel):
    """Search/social metadata derived from frontmatter."""

    meta_description: str = ""
    keywords: list[str] = []


class PostSummary(_ArtifactModel):
    """Post metadata for the summary index (no rendered body)."""

    id: str
    slug: str = Field(..., pattern=SLUG_PATTERN)
    title: str
    publish_date: date
    last_modified: date
    author: str
    summary: str
    tags: list[str] = []
    category: str
    read_time: int = Field(..., ge=1)
    featured: bool = False
    published: bool = True
    seo: SEO = SEO()

    @field_validator("tags", mode="before")
    @classmethod
    def _unique_tags(cls, value):
        """Accept a comma string or a list; drop duplicates, keep order."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",")]
        return list(
            dict.fromkeys(str(tag) for tag in value if tag is not None and str(tag).strip())
        )


class Post(PostSummary):
    """Full post record, as written to ``posts/<slug>.json``."""

    content: str

    def to_summary(self) -> PostSummary:
        return PostSummary.model_validate(self.model_dump(exclude={"content"}))


class CategoryStat(_ArtifactModel):
    name: str
    slug: str
    count: int


class TagStat(_ArtifactModel):
    name: str
    count: int


class PostIndex(_ArtifactModel):
    """Summary index artifact (``posts.json``)."""

    posts: list[PostSummary]
    categories: list[CategoryStat] = []
    tags: list[TagStat] = []
