"""Tests for the post builder: slugs, excerpts, read time, and field defaults."""

import re
from datetime import date

import pytest
import yaml

from blog.config import Settings
from blog.services.build.builder import (
    ELLIPSIS,
    MissingTitleError,
    PostValidationError,
    build_post,
    calculate_read_time,
    generate_excerpt,
    slugify,
)


def _make_document(body="Some body text.", **meta):
    front = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"---\n{front}---\n\n{body}\n"


class TestSlugify:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Hello, World!", "hello-world"),
            ("  Multiple   Spaces -- and___underscores ", "multiple-spaces-and-underscores"),
            ("Café Déjà Vu", "cafe-deja-vu"),
            ("Don't Panic", "dont-panic"),
            ("Node.js (v20)", "nodejs-v20"),
            ("Tech", "tech"),
        ],
    )
    def test_known_titles(self, title, expected):
        assert slugify(title) == expected

    @pytest.mark.parametrize(
        "title",
        ["Hello   World", "--Edge--Case--", "A/B testing: 101%", "ÜBER ✨ cool 🚀 stuff"],
    )
    def test_slug_charset_and_collapsed_separators(self, title):
        slug = slugify(title)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert "--" not in slug
        assert not slug.startswith("-")
        assert not slug.endswith("-")

    def test_punctuation_only_gives_empty_slug(self):
        assert slugify("!!!") == ""


class TestGenerateExcerpt:
    def test_short_text_returned_as_is(self):
        assert generate_excerpt("<p>Hello <strong>world</strong></p>") == "Hello world"

    def test_entities_are_unescaped(self):
        assert generate_excerpt("<p>Fish &amp; chips</p>") == "Fish & chips"

    def test_cuts_at_sentence_in_final_fifth(self):
        text = "x" * 135 + ". " + "more words follow here and keep going well past the limit"
        excerpt = generate_excerpt(f"<p>{text}</p>")
        assert excerpt == "x" * 135 + "."

    def test_cuts_at_word_boundary_with_ellipsis(self):
        excerpt = generate_excerpt("<p>" + "word " * 50 + "</p>")
        assert excerpt.endswith(ELLIPSIS)
        assert excerpt == ("word " * 32).rstrip() + ELLIPSIS
        assert len(excerpt) <= 160 + len(ELLIPSIS)

    def test_early_period_is_ignored(self):
        excerpt = generate_excerpt("<p>Short. " + "word " * 60 + "</p>")
        assert excerpt.startswith("Short. word")
        assert excerpt.endswith(ELLIPSIS)

    def test_single_long_word_is_hard_cut(self):
        excerpt = generate_excerpt("a" * 200)
        assert excerpt == "a" * 160 + ELLIPSIS

    @pytest.mark.parametrize("max_length", [10, 50, 160])
    def test_length_bound(self, max_length):
        text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 10
        excerpt = generate_excerpt(text, max_length)
        assert 0 < len(excerpt) <= max_length + len(ELLIPSIS)


class TestCalculateReadTime:
    def test_empty_body_is_one_minute(self):
        assert calculate_read_time("") == 1

    def test_exactly_one_minute(self):
        assert calculate_read_time("word " * 200) == 1

    def test_rounds_up(self):
        assert calculate_read_time("word " * 201) == 2
        assert calculate_read_time("word\n" * 450) == 3

    def test_custom_speed(self):
        assert calculate_read_time("word " * 100, words_per_minute=50) == 2


class TestBuildPost:
    def test_full_frontmatter(self, timestamps):
        raw = _make_document(
            "## Intro\n\nBody text here.",
            title="My First Post",
            slug="first",
            date=date(2024, 3, 15),
            lastModified=date(2024, 3, 20),
            author="Alice",
            summary="A summary.",
            tags=["Python", "Testing"],
            category="Tech",
            readTime=7,
            featured=True,
            published=True,
            description="Meta description",
            keywords=["kw1", "kw2"],
        )
        post = build_post(raw, timestamps, settings=Settings())

        assert post.id == "first"
        assert post.slug == "first"
        assert post.title == "My First Post"
        assert post.publish_date == date(2024, 3, 15)
        assert post.last_modified == date(2024, 3, 20)
        assert post.author == "Alice"
        assert post.summary == "A summary."
        assert post.tags == ["Python", "Testing"]
        assert post.category == "Tech"
        assert post.read_time == 7
        assert post.featured is True
        assert post.published is True
        assert post.seo.meta_description == "Meta description"
        assert post.seo.keywords == ["kw1", "kw2"]
        assert 'id="intro"' in post.content

    def test_defaults_are_derived(self, timestamps):
        raw = _make_document("Hello there. " * 5, title="Defaults Everywhere")
        post = build_post(raw, timestamps, settings=Settings())

        assert post.slug == "defaults-everywhere"
        assert post.id == post.slug
        assert post.author == "Franco"
        assert post.category == "Uncategorized"
        assert post.featured is False
        assert post.published is True
        assert post.tags == []
        assert post.read_time == 1
        assert post.publish_date == timestamps.created
        assert post.last_modified == timestamps.modified
        assert post.summary == ("Hello there. " * 5).strip()
        assert post.seo.meta_description == post.summary
        assert post.seo.keywords == []

    def test_missing_title_raises(self, timestamps):
        raw = _make_document(category="Tech")
        with pytest.raises(MissingTitleError):
            build_post(raw, timestamps, source="no-title.md", settings=Settings())

    def test_document_without_frontmatter_has_no_title(self, timestamps):
        with pytest.raises(MissingTitleError):
            build_post("# Just markdown", timestamps, settings=Settings())

    def test_published_false_is_respected(self, timestamps):
        raw = _make_document(title="Draft", published=False)
        assert build_post(raw, timestamps, settings=Settings()).published is False

    def test_explicit_slug_is_normalized(self, timestamps):
        raw = _make_document(title="Whatever", slug="My Custom Slug")
        assert build_post(raw, timestamps, settings=Settings()).slug == "my-custom-slug"

    def test_punctuation_title_is_rejected(self, timestamps):
        raw = _make_document(title="???")
        with pytest.raises(PostValidationError):
            build_post(raw, timestamps, settings=Settings())

    def test_excerpt_key_used_for_summary(self, timestamps):
        raw = _make_document(title="T", excerpt="From excerpt")
        assert build_post(raw, timestamps, settings=Settings()).summary == "From excerpt"

    def test_keywords_fall_back_to_tags(self, timestamps):
        raw = _make_document(title="T", tags=["a", "b"])
        assert build_post(raw, timestamps, settings=Settings()).seo.keywords == ["a", "b"]

    def test_long_title_keeps_full_slug(self, timestamps):
        raw = _make_document(title="word " * 45)
        post = build_post(raw, timestamps, settings=Settings())
        assert post.slug == "-".join(["word"] * 45)
        assert len(post.slug) > 200

    def test_null_tags_are_dropped(self, timestamps):
        raw = _make_document(title="T", tags=["python", None])
        assert build_post(raw, timestamps, settings=Settings()).tags == ["python"]

    def test_duplicate_tags_dropped_in_order(self, timestamps):
        raw = _make_document(title="T", tags=["Python", "python", "Python", "AI"])
        post = build_post(raw, timestamps, settings=Settings())
        assert post.tags == ["Python", "python", "AI"]

    def test_iso_string_dates(self, timestamps):
        raw = _make_document(title="T", date="2024-05-01T23:30:00Z")
        assert build_post(raw, timestamps, settings=Settings()).publish_date == date(2024, 5, 1)

    def test_invalid_date_raises(self, timestamps):
        raw = _make_document(title="T", date="not a date")
        with pytest.raises(PostValidationError):
            build_post(raw, timestamps, settings=Settings())

    def test_invalid_read_time_raises(self, timestamps):
        raw = _make_document(title="T", readTime="soon")
        with pytest.raises(PostValidationError):
            build_post(raw, timestamps, settings=Settings())

    def test_read_time_counts_markdown_body(self, timestamps):
        raw = _make_document("word " * 450, title="Long")
        assert build_post(raw, timestamps, settings=Settings()).read_time == 3

    def test_settings_defaults_are_used(self, timestamps):
        settings = Settings(default_author="Bob", default_category="Misc")
        post = build_post(_make_document(title="T"), timestamps, settings=settings)
        assert post.author == "Bob"
        assert post.category == "Misc"

    def test_malformed_frontmatter_raises_yaml_error(self, timestamps):
        raw = "---\ntitle: [unclosed\n---\n\nbody\n"
        with pytest.raises(yaml.YAMLError):
            build_post(raw, timestamps, settings=Settings())

    def test_artifact_uses_camel_case(self, timestamps):
        raw = _make_document(title="T", date=date(2024, 1, 5))
        data = build_post(raw, timestamps, settings=Settings()).to_artifact()
        assert data["publishDate"] == "2024-01-05"
        assert data["lastModified"] == "2024-01-02"
        assert "readTime" in data
        assert "metaDescription" in data["seo"]
        assert "content" in data
