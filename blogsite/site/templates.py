"""HTML templates for blog pages."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from html import escape

from .. import __version__
from ..config import SCHEMA_VERSION
from ..content.markdown import Heading
from .styles import CSS


def html_doc(title: str, site_title: str, root: str, body: str, description: str | None = None) -> str:
    """Wrap a page body; ``root`` is the path or absolute URL of the site root, ending in "/" unless empty."""
    meta_desc = (
        f'<meta name="description" content="{escape(description, quote=True)}">\n'
        if description
        else ""
    )
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f'<meta name="generator" content="blogsite {__version__} (layout {SCHEMA_VERSION})">\n'
        f"{meta_desc}"
        f"<title>{escape(title)}</title>\n"
        f"<style>{CSS}</style>\n"
        "</head>\n"
        "<body>\n"
        '<header class="site">\n'
        f'<a class="logo" href="{escape(root, quote=True)}index.html">{escape(site_title)}</a>\n'
        f"<nav>{link(root + 'index.html', 'posts')}</nav>\n"
        "</header>\n"
        "<main>\n"
        f"{body}\n"
        "</main>\n"
        "</body>\n"
        "</html>\n"
    )


def link(href: str, text: str) -> str:
    return f'<a href="{escape(href, quote=True)}">{escape(text)}</a>'


def h1(text: str) -> str:
    return f"<h1>{escape(text)}</h1>"


def rule() -> str:
    return '<hr class="rule">'


def muted(text: str) -> str:
    return f'<div class="muted">{escape(text)}</div>'


@dataclass(frozen=True)
class PostRow:
    title: str
    updated: str
    reading: str
    href: str


def post_index(rows: Iterable[PostRow]) -> str:
    lines = ['<ul class="posts">']
    for r in rows:
        lines.append(
            "<li>"
            f"{link(r.href, r.title)}"
            f'<div class="muted">{escape(r.updated)} · {escape(r.reading)}</div>'
            "</li>"
        )
    lines.append("</ul>")
    return "\n".join(lines)


def table_of_contents(headings: Iterable[Heading], max_level: int = 3) -> str:
    items = [h for h in headings if h.level <= max_level]
    if len(items) < 2:
        return ""
    lines = ['<nav class="toc">', "<ul>"]
    for h in items:
        lines.append(f"<li>{link('#' + h.anchor, h.text)}</li>")
    lines.extend(["</ul>", "</nav>"])
    return "\n".join(lines)


def post_page(title: str, meta_lines: list[str], toc_html: str, html: str) -> str:
    lines = ["<article>", h1(title)]
    for m in meta_lines:
        lines.append(muted(m))
    lines.append(rule())
    if toc_html:
        lines.append(toc_html)
    if html:
        lines.append(html)
    lines.append("</article>")
    return "\n".join(lines)
