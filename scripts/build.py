"""Build the blog's JSON artifacts from markdown posts.

Usage:
    python -m scripts.build

Reads ``BLOG_CONTENT_DIR`` (default ``content/posts``) and writes to
``BLOG_OUTPUT_DIR`` (default ``source/blog/data``).
"""

import logging
import sys

from blog.services.build.orchestrator import run_build

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> int:
    print("Starting markdown processing...")
    try:
        stats = run_build()
    except Exception as e:
        print(f"Error processing markdown files: {e}", file=sys.stderr)
        return 1

    if stats.posts == 0:
        print("No posts were generated.")
        return 0

    print(f"\nSuccessfully processed {stats.posts} posts!")
    print("\nSummary:")
    print(f"  Posts:       {stats.posts}")
    print(f"  Categories:  {stats.categories}")
    print(f"  Tags:        {stats.tags}")
    print(f"  Published:   {stats.published}")
    print(f"  Featured:    {stats.featured}")
    print(f"  Skipped:     {stats.skipped}")
    print(f"  Failed:      {stats.failed}")
    print(f"  Duplicates:  {stats.duplicates}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
