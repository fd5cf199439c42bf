"""Local artifact storage: reads and writes the JSON files the site serves.

Layout under ``output_dir``::

    posts.json            summary index (every post, no content)
    posts/<slug>.json     one detail record per post
"""

import json
import logging
import re
from pathlib import Path

from blog.models.post import Post, PostIndex

logger = logging.getLogger(__name__)

_SAFE_PATH_SEGMENT_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")

INDEX_FILE = "posts.json"
POSTS_DIR = "posts"


def validate_path_segment(segment: str) -> str:
    """Validate a slug before it becomes a file name.

    Rejects path traversal sequences (..), slashes, backslashes, and other
    unsafe characters. Returns the segment unchanged if valid; raises
    ValueError otherwise.
    """
    if not segment or ".." in segment or not _SAFE_PATH_SEGMENT_RE.match(segment):
        raise ValueError(f"Invalid path segment: {segment!r}")
    return segment


def ensure_output_dirs(output_dir: Path) -> Path:
    """Create ``output_dir`` and its ``posts/`` subdirectory; return the latter."""
    posts_dir = output_dir / POSTS_DIR
    posts_dir.mkdir(parents=True, exist_ok=True)
    return posts_dir


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def post_detail_path(output_dir: Path, slug: str) -> Path:
    return output_dir / POSTS_DIR / f"{validate_path_segment(slug)}.json"


def write_post_detail(output_dir: Path, post: Post) -> Path:
    """Write ``posts/<slug>.json`` for *post*, replacing any previous file."""
    path = post_detail_path(output_dir, post.slug)
    _write_json(path, post.to_artifact())
    return path


def write_post_index(output_dir: Path, index: PostIndex) -> Path:
    """Write the summary index ``posts.json``."""
    path = output_dir / INDEX_FILE
    _write_json(path, index.to_artifact())
    return path


def read_post_index(output_dir: Path) -> PostIndex:
    """Read ``posts.json``; a missing file is an empty index."""
    path = output_dir / INDEX_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return PostIndex(posts=[])
    return PostIndex.model_validate(data)


def read_post_detail(output_dir: Path, slug: str) -> Post | None:
    """Read one detail record, or None if it was never written."""
    try:
        path = post_detail_path(output_dir, slug)
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError:
        logger.warning("Rejected or unreadable post artifact for %r", slug)
        return None
    except FileNotFoundError:
        return None
    return Post.model_validate(data)
