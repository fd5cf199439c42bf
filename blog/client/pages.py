"""Page dispatch: decide the page type once, then build only its renderer."""

import enum
import logging
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

import httpx

from blog.client.detail_renderer import DetailView, ErrorView, load_post_page
from blog.client.index_renderer import (
    IndexView,
    load_index_state,
    render_index,
    render_index_error,
)
from blog.client.state import (
    IndexState,
    SetCategoryFilter,
    SetPage,
    SetSearchTerm,
    reduce,
)
from blog.config import Settings, get_settings
from blog.services.http_client import ArtifactFetchError

logger = logging.getLogger(__name__)


class PageType(enum.Enum):
    INDEX = "index"
    POST = "post"
    OTHER = "other"


@dataclass(frozen=True)
class IndexErrorView:
    """Terminal error state for the index page."""

    reason: str

    def containers(self) -> dict[str, str]:
        return {"blogPosts": render_index_error()}


def detect_page(url: str) -> PageType:
    """Classify a blog URL by its path."""
    path = urlsplit(url).path
    if path.endswith("post.html"):
        return PageType.POST
    if path.endswith(("/blog/", "/blog", "/blog/index.html")):
        return PageType.INDEX
    return PageType.OTHER


def _query_value(url: str, key: str) -> str:
    values = parse_qs(urlsplit(url).query).get(key)
    return values[0] if values else ""


def apply_query(state: IndexState, url: str) -> IndexState:
    """Replay ``category``, ``search`` and ``page`` query params as actions."""
    category = _query_value(url, "category")
    if category:
        state = reduce(state, SetCategoryFilter(category))
    search = _query_value(url, "search")
    if search:
        state = reduce(state, SetSearchTerm(search))
    page = _query_value(url, "page")
    if page.isdigit():
        state = reduce(state, SetPage(int(page)))
    return state


async def render_index_page(
    client: httpx.AsyncClient, url: str, settings: Settings
) -> IndexView | IndexErrorView:
    try:
        state = await load_index_state(client, settings.posts_per_page)
    except ArtifactFetchError as e:
        logger.error("Failed to initialize blog: %s", e)
        return IndexErrorView(reason=e.reason)
    return render_index(apply_query(state, url), settings.recent_posts_limit)


async def render_page(
    url: str,
    client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> IndexView | IndexErrorView | DetailView | ErrorView | None:
    """Render whatever *url* points at; None for pages without blog content."""
    settings = settings or get_settings()
    page_type = detect_page(url)

    if page_type is PageType.INDEX:
        return await render_index_page(client, url, settings)
    if page_type is PageType.POST:
        return await load_post_page(
            client,
            _query_value(url, "post"),
            page_url=url,
            site_name=settings.site_name,
            related_limit=settings.related_posts_limit,
        )
    return None
