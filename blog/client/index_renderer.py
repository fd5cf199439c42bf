"""Blog index rendering: post cards, sidebar, filters, and pagination.

Each ``render_*`` function returns the full markup for one page container
(``blogPosts``, ``categoriesList``, ...). Calling it again with the same
state returns the same markup.
"""

from dataclasses import dataclass
from datetime import date
from html import escape

import httpx
from pydantic import ValidationError

from blog.client.state import (
    ALL,
    DEFAULT_PAGE_SIZE,
    IndexState,
    initial_state,
    page_count,
    visible_posts,
)
from blog.models.post import CategoryStat, PostIndex, PostSummary, TagStat
from blog.services.http_client import ArtifactFetchError, fetch_artifact

INDEX_PATH = "posts.json"
NO_POSTS_HTML = '<div class="no-posts">No posts found matching your criteria.</div>'


def format_date(value: date) -> str:
    """``January 5, 2024`` style date."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def post_url(slug: str) -> str:
    return f"post.html?post={escape(slug)}"


def render_tag_list(tags: list[str]) -> str:
    return "".join(f'<span class="tag">{escape(tag)}</span>' for tag in tags)


def render_post_card(post: PostSummary) -> str:
    featured_class = " featured" if post.featured else ""
    badge = '<span class="featured-badge">Featured</span>' if post.featured else ""
    url = post_url(post.slug)
    return (
        f'<article class="post-card{featured_class}">'
        '<div class="post-card-content">'
        '<div class="post-meta">'
        f'<span class="post-date">{format_date(post.publish_date)}</span>'
        f'<span class="post-category">{escape(post.category)}</span>'
        f'<span class="post-read-time">{post.read_time} min read</span>'
        "</div>"
        f'<h2 class="post-card-title"><a href="{url}">{escape(post.title)}</a></h2>'
        f'<p class="post-card-summary">{escape(post.summary)}</p>'
        f'<div class="post-card-tags">{render_tag_list(post.tags)}</div>'
        '<div class="post-card-footer">'
        f'<a href="{url}" class="read-more">Read More →</a>{badge}'
        "</div>"
        "</div>"
        "</article>"
    )


def render_posts(state: IndexState) -> str:
    posts = visible_posts(state)
    if not posts:
        return NO_POSTS_HTML
    return "".join(render_post_card(post) for post in posts)


def render_categories(categories: tuple[CategoryStat, ...] | list[CategoryStat]) -> str:
    return "".join(
        f'<li><a href="#" data-category="{escape(c.slug)}" class="category-link">'
        f"{escape(c.name)} ({c.count})</a></li>"
        for c in categories
    )


def render_tags(tags: tuple[TagStat, ...] | list[TagStat]) -> str:
    return "".join(
        f'<span class="tag-link" data-tag="{escape(t.name)}">{escape(t.name)}</span>'
        for t in tags
    )


def render_recent_posts(
    posts: tuple[PostSummary, ...] | list[PostSummary], limit: int = 5
) -> str:
    recent = sorted(posts, key=lambda p: p.publish_date, reverse=True)[:limit]
    return "".join(
        f'<li><a href="{post_url(p.slug)}">{escape(p.title)}</a></li>' for p in recent
    )


def _filter_button(value: str, label: str, active: bool) -> str:
    active_class = " active" if active else ""
    return (
        f'<button class="filter-btn{active_class}" data-filter="{escape(value)}">'
        f"{escape(label)}</button>"
    )


def render_filters(
    categories: tuple[CategoryStat, ...] | list[CategoryStat], active: str = ALL
) -> str:
    """An "All" button plus one button per category; *active* is highlighted."""
    active = (active or ALL).lower()
    buttons = [_filter_button(ALL, "All", active == ALL)]
    buttons.extend(
        _filter_button(c.slug, c.name, active in (c.slug, c.name.lower()))
        for c in categories
    )
    return "".join(buttons)


def render_pagination(state: IndexState) -> str:
    """Previous / numbered / Next buttons; empty when everything fits on one page."""
    pages = page_count(state)
    if pages <= 1:
        return ""

    parts: list[str] = []
    if state.page > 1:
        parts.append(
            f'<button class="pagination-btn" data-page="{state.page - 1}">← Previous</button>'
        )
    for number in range(1, pages + 1):
        active_class = " active" if number == state.page else ""
        parts.append(
            f'<button class="pagination-btn{active_class}" data-page="{number}">'
            f"{number}</button>"
        )
    if state.page < pages:
        parts.append(
            f'<button class="pagination-btn" data-page="{state.page + 1}">Next →</button>'
        )
    return "".join(parts)


def render_index_error(message: str = "Failed to load blog data") -> str:
    return f'<div class="error-message">{escape(message)}</div>'


@dataclass(frozen=True)
class IndexView:
    """Rendered markup for every container on the index page."""

    posts: str
    pagination: str
    filters: str
    categories: str
    tags: str
    recent_posts: str

    def containers(self) -> dict[str, str]:
        """Markup keyed by the page element id it replaces."""
        return {
            "blogPosts": self.posts,
            "pagination": self.pagination,
            "categoryFilters": self.filters,
            "categoriesList": self.categories,
            "tagsList": self.tags,
            "recentPosts": self.recent_posts,
        }


def render_index(state: IndexState, recent_limit: int = 5) -> IndexView:
    return IndexView(
        posts=render_posts(state),
        pagination=render_pagination(state),
        filters=render_filters(state.categories, state.category_filter),
        categories=render_categories(state.categories),
        tags=render_tags(state.tags),
        recent_posts=render_recent_posts(state.posts, recent_limit),
    )


async def load_index_state(
    client: httpx.AsyncClient, page_size: int = DEFAULT_PAGE_SIZE
) -> IndexState:
    """Fetch ``posts.json`` and build the initial state (published posts only).

    Raises:
        ArtifactFetchError: The index could not be fetched or decoded.
    """
    data = await fetch_artifact(client, INDEX_PATH)
    try:
        index = PostIndex.model_validate(data)
    except ValidationError as exc:
        raise ArtifactFetchError(INDEX_PATH, "invalid index payload") from exc
    return initial_state(index.posts, index.categories, index.tags, page_size)
