"""Index page state: an immutable record plus a single reducer.

Every user interaction (category button, search box, page button) becomes an
action passed to :func:`reduce`, which returns a new state. Render functions
take a state and never mutate it.
"""

import math
from dataclasses import dataclass, replace
from typing import Union

from blog.models.post import CategoryStat, PostSummary, TagStat
from blog.services.build.builder import slugify

ALL = "all"
DEFAULT_PAGE_SIZE = 6


@dataclass(frozen=True)
class IndexState:
    posts: tuple[PostSummary, ...] = ()
    categories: tuple[CategoryStat, ...] = ()
    tags: tuple[TagStat, ...] = ()
    category_filter: str = ALL
    search_term: str = ""
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class SetCategoryFilter:
    value: str


@dataclass(frozen=True)
class SetSearchTerm:
    value: str


@dataclass(frozen=True)
class SetPage:
    value: int


Action = Union[SetCategoryFilter, SetSearchTerm, SetPage]


def matches_category(post: PostSummary, category_filter: str) -> bool:
    if not category_filter or category_filter == ALL:
        return True
    wanted = category_filter.lower()
    return post.category.lower() == wanted or slugify(post.category) == wanted


def matches_search(post: PostSummary, search_term: str) -> bool:
    term = search_term.strip().lower()
    if not term:
        return True
    return (
        term in post.title.lower()
        or term in post.summary.lower()
        or any(term in tag.lower() for tag in post.tags)
    )


def filter_posts(
    posts: tuple[PostSummary, ...] | list[PostSummary],
    category_filter: str = ALL,
    search_term: str = "",
) -> list[PostSummary]:
    """Posts matching both the category filter and the search term, in order."""
    return [
        post
        for post in posts
        if matches_category(post, category_filter) and matches_search(post, search_term)
    ]


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if page_size > 0 else 0


def filtered_posts(state: IndexState) -> list[PostSummary]:
    return filter_posts(state.posts, state.category_filter, state.search_term)


def page_count(state: IndexState) -> int:
    return total_pages(len(filtered_posts(state)), state.page_size)


def visible_posts(state: IndexState) -> list[PostSummary]:
    """The slice of filtered posts shown on the current page."""
    start = (state.page - 1) * state.page_size
    return filtered_posts(state)[start : start + state.page_size]


def reduce(state: IndexState, action: Action) -> IndexState:
    """Apply *action* to *state* and return the new state.

    Changing the filter or search term always returns to page 1. Page
    changes are clamped to the available range.
    """
    if isinstance(action, SetCategoryFilter):
        return replace(state, category_filter=action.value or ALL, page=1)
    if isinstance(action, SetSearchTerm):
        return replace(state, search_term=action.value.lower(), page=1)
    if isinstance(action, SetPage):
        last = max(1, page_count(state))
        return replace(state, page=min(max(1, action.value), last))
    raise TypeError(f"Unknown action: {action!r}")


def initial_state(
    posts: list[PostSummary],
    categories: list[CategoryStat] | None = None,
    tags: list[TagStat] | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> IndexState:
    """State for a freshly loaded index: published posts only, page 1."""
    return IndexState(
        posts=tuple(p for p in posts if p.published),
        categories=tuple(categories or ()),
        tags=tuple(tags or ()),
        page_size=page_size,
    )
