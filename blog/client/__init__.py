"""Renderers for the blog index and post pages, driven by the JSON artifacts."""

from blog.client.detail_renderer import DetailView, ErrorView, load_post_page
from blog.client.index_renderer import IndexView, load_index_state, render_index
from blog.client.pages import PageType, detect_page, render_page
from blog.client.progress import ReadingProgress, ScrollMetrics, compute_progress
from blog.client.state import IndexState, filter_posts, reduce

__all__ = [
    "DetailView",
    "ErrorView",
    "IndexState",
    "IndexView",
    "PageType",
    "ReadingProgress",
    "ScrollMetrics",
    "compute_progress",
    "detect_page",
    "filter_posts",
    "load_index_state",
    "load_post_page",
    "reduce",
    "render_index",
    "render_page",
]
