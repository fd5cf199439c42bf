"""Render a blog page from the published artifacts and print its markup.

Usage:
    python -m scripts.render_page "http://localhost:8000/blog/index.html?category=tech&page=2"
    python -m scripts.render_page "http://localhost:8000/blog/post.html?post=my-first-post"

Artifacts are fetched from ``BLOG_DATA_BASE_URL``.
"""

import asyncio
import logging
import sys

from blog.client.detail_renderer import DetailView, ErrorView, render_meta_tags
from blog.client.pages import IndexErrorView, render_page
from blog.services.http_client import get_shared_client

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


async def main(argv: list[str]) -> int:
    if len(argv) != 1:
        print(__doc__, file=sys.stderr)
        return 2

    client = get_shared_client()
    try:
        view = await render_page(argv[0], client)
    finally:
        await client.aclose()

    if view is None:
        print(f"No blog content at {argv[0]}", file=sys.stderr)
        return 1

    if isinstance(view, DetailView):
        print(render_meta_tags(view.metadata))
        print(f"<!-- share: {view.share.twitter} -->")

    for element_id, markup in view.containers().items():
        print(f'<!-- #{element_id} -->\n{markup}')

    if isinstance(view, (ErrorView, IndexErrorView)):
        print(f"Error: {view.reason}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
