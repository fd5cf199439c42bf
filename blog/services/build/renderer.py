"""Markdown to HTML rendering for post bodies.

Headings get stable ids (via the ``toc`` extension with our own slug rule)
and fenced code blocks get a language-tagged wrapper.
"""

import re

import markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor

_NON_WORD_RE = re.compile(r"[^\w]+")

_CODE_BLOCK_RE = re.compile(
    r'<pre><code class="language-(?P<lang>[^"]+)">(?P<body>.*?)</code></pre>',
    re.DOTALL,
)


def heading_id(value: str, separator: str = "-") -> str:
    """Anchor id for a heading: lowercased, non-word runs become *separator*."""
    return _NON_WORD_RE.sub(separator, value.lower()).strip(separator)


def wrap_code_blocks(html: str) -> str:
    """Wrap ``<pre><code class="language-x">`` blocks in a tagged container."""

    def _wrap(match: re.Match) -> str:
        lang = match.group("lang")
        return (
            '<div class="code-block">'
            f'<span class="code-language-tag">{lang}</span>'
            f'<pre><code class="language-{lang}">{match.group("body")}</code></pre>'
            "</div>"
        )

    return _CODE_BLOCK_RE.sub(_wrap, html)


class CodeBlockPostprocessor(Postprocessor):
    def run(self, text: str) -> str:
        return wrap_code_blocks(text)


class CodeBlockExtension(Extension):
    """Registers the code-block wrapper after raw HTML is restored."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # raw_html restores fenced code at priority 30; run after it
        md.postprocessors.register(CodeBlockPostprocessor(md), "code_block", 10)


def _build_markdown() -> markdown.Markdown:
    return markdown.Markdown(
        extensions=["fenced_code", "tables", "smarty", "toc", CodeBlockExtension()],
        extension_configs={"toc": {"slugify": heading_id}},
    )


def render_markdown(body: str) -> str:
    """Render a markdown body to HTML."""
    return _build_markdown().convert(body)
