"""Single post page rendering: content, metadata, TOC, sharing, related posts."""

import logging
import re
from dataclasses import dataclass, field
from html import escape
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from blog.client.index_renderer import INDEX_PATH, format_date, post_url, render_tag_list
from blog.client.progress import ReadingProgress
from blog.models.post import SLUG_PATTERN, Post, PostIndex, PostSummary
from blog.services.http_client import ArtifactFetchError, fetch_artifact

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(SLUG_PATTERN)

TOC_HEADINGS = ("h2", "h3", "h4")
TOC_INDENT = {"h2": "", "h3": "toc-indent-1", "h4": "toc-indent-2"}
NO_HEADINGS_HTML = "<p>No headings found.</p>"
NO_RELATED_HTML = "<li>No related posts found.</li>"


@dataclass(frozen=True)
class PageMetadata:
    """Values for the document title and the description/OG/Twitter meta tags."""

    title: str
    description: str
    keywords: str
    og_title: str
    og_description: str
    og_url: str
    twitter_title: str
    twitter_description: str


def build_page_metadata(post: Post, page_url: str, site_name: str) -> PageMetadata:
    description = post.seo.meta_description
    return PageMetadata(
        title=f"{post.title} - {site_name}",
        description=description,
        keywords=", ".join(post.seo.keywords),
        og_title=post.title,
        og_description=description,
        og_url=page_url,
        twitter_title=post.title,
        twitter_description=description,
    )


def render_meta_tags(meta: PageMetadata) -> str:
    return "\n".join(
        [
            f"<title>{escape(meta.title)}</title>",
            f'<meta name="title" content="{escape(meta.title)}" />',
            f'<meta name="description" content="{escape(meta.description)}" />',
            f'<meta name="keywords" content="{escape(meta.keywords)}" />',
            '<meta property="og:type" content="article" />',
            f'<meta property="og:title" content="{escape(meta.og_title)}" />',
            f'<meta property="og:description" content="{escape(meta.og_description)}" />',
            f'<meta property="og:url" content="{escape(meta.og_url)}" />',
            '<meta name="twitter:card" content="summary" />',
            f'<meta name="twitter:title" content="{escape(meta.twitter_title)}" />',
            f'<meta name="twitter:description" content="{escape(meta.twitter_description)}" />',
        ]
    )


@dataclass(frozen=True)
class ShareLinks:
    twitter: str
    linkedin: str
    email: str


def build_share_links(post: PostSummary, page_url: str) -> ShareLinks:
    url = quote(page_url, safe="")
    title = quote(post.title, safe="")
    text = quote(post.summary, safe="")
    return ShareLinks(
        twitter=f"https://twitter.com/intent/tweet?url={url}&text={title}",
        linkedin=f"https://www.linkedin.com/sharing/share-offsite/?url={url}",
        email=f"mailto:?subject={title}&body={text}%0A%0A{url}",
    )


def render_post_header(post: Post) -> dict[str, str]:
    """Breadcrumb, title, date, read time, category and tags for one post."""
    return {
        "breadcrumbTitle": escape(post.title),
        "postTitle": escape(post.title),
        "postDate": format_date(post.publish_date),
        "postReadTime": f"{post.read_time} min read",
        "postCategory": escape(post.category),
        "postTags": render_tag_list(post.tags),
    }


def build_table_of_contents(content: str) -> tuple[str, str]:
    """Give every h2/h3/h4 an anchor id and build the TOC list.

    Ids are ``heading-0``, ``heading-1``, ... in document order, so they stay
    stable for a given body. Returns ``(content_with_ids, toc_markup)``.
    """
    soup = BeautifulSoup(content, "html.parser")
    headings = soup.find_all(TOC_HEADINGS)
    if not headings:
        return content, NO_HEADINGS_HTML

    items: list[str] = []
    for index, heading in enumerate(headings):
        anchor = f"heading-{index}"
        heading["id"] = anchor
        indent = TOC_INDENT[heading.name]
        items.append(
            f'<li class="{indent}"><a href="#{anchor}">'
            f"{escape(heading.get_text())}</a></li>"
        )
    return str(soup), f"<ul>{''.join(items)}</ul>"


def select_related_posts(
    index_posts: list[PostSummary], current: PostSummary, limit: int = 3
) -> list[PostSummary]:
    """Other published posts sharing the category or a tag, in index order."""
    current_tags = set(current.tags)
    related = [
        post
        for post in index_posts
        if post.id != current.id
        and post.published
        and (post.category == current.category or current_tags.intersection(post.tags))
    ]
    return related[:limit]


def render_related_posts(posts: list[PostSummary]) -> str:
    if not posts:
        return NO_RELATED_HTML
    return "".join(
        f'<li><a href="{post_url(p.slug)}">{escape(p.title)}</a></li>' for p in posts
    )


async def load_related_posts(
    client: httpx.AsyncClient, current: PostSummary, limit: int = 3
) -> list[PostSummary]:
    """Re-fetch the summary index and pick related posts.

    A failure here only empties the related list; it never fails the page.
    """
    try:
        data = await fetch_artifact(client, INDEX_PATH)
        index = PostIndex.model_validate(data)
    except (ArtifactFetchError, ValidationError) as e:
        logger.error("Error loading related posts for %s: %s", current.slug, e)
        return []
    return select_related_posts(index.posts, current, limit)


@dataclass(frozen=True)
class DetailView:
    """A fully rendered post page.

    ``progress`` starts at 0% and is driven by the caller: feed it scroll
    events and ``flush`` it when scrolling stops.
    """

    post: Post
    metadata: PageMetadata
    body: str
    toc: str
    related: str
    share: ShareLinks
    progress: ReadingProgress = field(compare=False)

    def containers(self) -> dict[str, str]:
        """Markup/text keyed by the page element id it fills."""
        return {
            **render_post_header(self.post),
            "postBody": self.body,
            "tableOfContents": self.toc,
            "relatedPosts": self.related,
        }


@dataclass(frozen=True)
class ErrorView:
    """Terminal error state: the post could not be loaded. No retry."""

    slug: str
    reason: str

    def containers(self) -> dict[str, str]:
        return {
            "errorState": (
                '<div class="error-state"><h2>Post not found</h2>'
                "<p>The post you're looking for doesn't exist or has been moved.</p>"
                '<a href="index.html" class="back-link">← Back to Blog</a></div>'
            )
        }


async def load_post_page(
    client: httpx.AsyncClient,
    slug: str,
    page_url: str,
    site_name: str = "Franco's Blog",
    related_limit: int = 3,
) -> DetailView | ErrorView:
    """Fetch ``posts/<slug>.json`` and render the whole post page.

    Any fetch or payload failure returns an ErrorView; a post is either fully
    rendered or not rendered at all.
    """
    if not slug or not _SLUG_RE.match(slug):
        logger.warning("Rejected post slug %r", slug)
        return ErrorView(slug=slug, reason="invalid slug")

    try:
        data = await fetch_artifact(client, f"posts/{slug}.json")
        post = Post.model_validate(data)
    except ArtifactFetchError as e:
        logger.error("Error loading post %s: %s", slug, e)
        return ErrorView(slug=slug, reason=e.reason)
    except ValidationError as e:
        logger.error("Invalid post payload for %s: %s", slug, e)
        return ErrorView(slug=slug, reason="invalid post payload")

    related = await load_related_posts(client, post, related_limit)
    body, toc = build_table_of_contents(post.content)

    return DetailView(
        post=post,
        metadata=build_page_metadata(post, page_url, site_name),
        body=body,
        toc=toc,
        related=render_related_posts(related),
        share=build_share_links(post, page_url),
        progress=ReadingProgress(),
    )
