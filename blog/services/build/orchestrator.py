"""Build orchestrator: ties read, parse, build, aggregate, and write together."""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from blog.config import Settings, get_settings
from blog.models.post import CategoryStat, Post, PostIndex, TagStat
from blog.services.artifact_storage import (
    ensure_output_dirs,
    write_post_detail,
    write_post_index,
)
from blog.services.build.builder import (
    DocumentTimestamps,
    PostValidationError,
    build_post,
    slugify,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Stats from a build run."""

    found: int = 0
    posts: int = 0
    categories: int = 0
    tags: int = 0
    published: int = 0
    featured: int = 0
    skipped: int = 0
    failed: int = 0
    duplicates: int = 0


def list_markdown_files(content_dir: Path) -> list[Path]:
    """Return the ``*.md`` files in *content_dir*, creating it if missing."""
    if not content_dir.exists():
        logger.info("Content directory %s does not exist, creating it", content_dir)
        content_dir.mkdir(parents=True, exist_ok=True)
        return []
    return sorted(p for p in content_dir.glob("*.md") if p.is_file())


def generate_metadata(posts: list[Post]) -> tuple[list[CategoryStat], list[TagStat]]:
    """Category and tag frequency tallies, in first-seen order."""
    categories: dict[str, int] = {}
    tags: dict[str, int] = {}
    for post in posts:
        if post.category:
            categories[post.category] = categories.get(post.category, 0) + 1
        for tag in post.tags:
            tags[tag] = tags.get(tag, 0) + 1

    return (
        [
            CategoryStat(name=name, slug=slugify(name), count=count)
            for name, count in categories.items()
        ],
        [TagStat(name=name, count=count) for name, count in tags.items()],
    )


def sort_posts(posts: list[Post]) -> list[Post]:
    """Newest first; posts sharing a date keep their input order."""
    return sorted(posts, key=lambda p: p.publish_date, reverse=True)


def build_index(posts: list[Post], settings: Settings) -> PostIndex:
    """Assemble the summary index from already-sorted posts."""
    listed = posts
    if settings.exclude_unpublished_from_index:
        listed = [p for p in posts if p.published]
    categories, tags = generate_metadata(listed)
    return PostIndex(
        posts=[p.to_summary() for p in listed],
        categories=categories,
        tags=tags,
    )


def load_posts(files: list[Path], stats: BuildStats, settings: Settings) -> list[Post]:
    """Build a Post per file, skipping invalid, unreadable and duplicate ones."""
    posts: list[Post] = []
    seen_slugs: dict[str, Path] = {}

    for path in files:
        logger.info("Processing: %s", path.name)
        try:
            raw = path.read_text(encoding="utf-8")
            timestamps = DocumentTimestamps.from_stat(path.stat())
            post = build_post(raw, timestamps, source=str(path), settings=settings)
        except PostValidationError as e:
            stats.skipped += 1
            logger.warning("Skipping %s: %s", path.name, e)
            continue
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as e:
            stats.failed += 1
            logger.error("Error processing %s: %s", path.name, e)
            continue

        if post.slug in seen_slugs:
            stats.duplicates += 1
            logger.error(
                "Duplicate slug '%s' in %s (already used by %s), rejecting",
                post.slug,
                path.name,
                seen_slugs[post.slug].name,
            )
            continue

        seen_slugs[post.slug] = path
        posts.append(post)

    return posts


def run_build(settings: Settings | None = None) -> BuildStats:
    """Run a full build: read -> build -> sort -> aggregate -> write.

    Per-document failures are logged and skipped. An empty content
    directory, or one where every document fails, ends the run quietly
    without touching existing artifacts.
    """
    settings = settings or get_settings()
    stats = BuildStats()

    logger.info("Starting markdown processing")
    ensure_output_dirs(settings.output_dir)

    files = list_markdown_files(settings.content_dir)
    stats.found = len(files)
    if not files:
        logger.info("No markdown files found in %s", settings.content_dir)
        return stats
    logger.info("Found %d markdown files", len(files))

    posts = load_posts(files, stats, settings)
    if not posts:
        logger.warning("No valid posts were processed")
        return stats

    posts = sort_posts(posts)
    index = build_index(posts, settings)

    for post in posts:
        path = write_post_detail(settings.output_dir, post)
        logger.info("Generated: %s", path)

    index_path = write_post_index(settings.output_dir, index)
    logger.info("Generated index: %s", index_path)

    stats.posts = len(posts)
    stats.categories = len(index.categories)
    stats.tags = len(index.tags)
    stats.published = sum(1 for p in posts if p.published)
    stats.featured = sum(1 for p in posts if p.featured)

    logger.info(
        "Build complete: %d posts, %d skipped, %d failed, %d duplicates",
        stats.posts,
        stats.skipped,
        stats.failed,
        stats.duplicates,
    )
    return stats
