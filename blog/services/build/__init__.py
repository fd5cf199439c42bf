"""Build services for turning markdown posts into JSON artifacts."""

from blog.services.build.builder import (
    DocumentTimestamps,
    MissingTitleError,
    PostValidationError,
    build_post,
    calculate_read_time,
    generate_excerpt,
    slugify,
)
from blog.services.build.orchestrator import (
    BuildStats,
    generate_metadata,
    run_build,
)
from blog.services.build.parser import ParsedDocument, parse_document
from blog.services.build.renderer import render_markdown

__all__ = [
    "BuildStats",
    "DocumentTimestamps",
    "MissingTitleError",
    "ParsedDocument",
    "PostValidationError",
    "build_post",
    "calculate_read_time",
    "generate_excerpt",
    "generate_metadata",
    "parse_document",
    "render_markdown",
    "run_build",
    "slugify",
]
