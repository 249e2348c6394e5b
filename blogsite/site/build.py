"""Render posts from the content store into a static site."""

from __future__ import annotations

import shutil
from pathlib import Path

from pydantic import BaseModel

from ..config import BASE_URL, SCHEMA_VERSION, SITE_TITLE
from ..content.markdown import markdown_to_html
from ..content.store import ContentStore, Document
from .templates import PostRow, html_doc, post_index, post_page, table_of_contents


class BuildReport(BaseModel):
    """Result of building the site."""

    schema_version: int = SCHEMA_VERSION
    out_dir: Path
    documents: int
    drafts_skipped: int
    pages: list[str]
    total_bytes: int
    warnings: list[str]


def render_document(doc: Document, site_title: str = SITE_TITLE, base_url: str = BASE_URL) -> str:
    """Full HTML page for one post. An empty body is valid.

    Site links are relative unless ``base_url`` is set.
    """
    meta_lines = [_dateline(doc)]
    if doc.meta.tags:
        meta_lines.append("tags: " + ", ".join(doc.meta.tags))

    body = post_page(
        title=doc.title,
        meta_lines=meta_lines,
        toc_html=table_of_contents(doc.headings),
        html=markdown_to_html(doc.body),
    )
    return html_doc(
        title=f"{doc.title} · {site_title}",
        site_title=site_title,
        root=_site_root(base_url, "../../"),
        body=body,
        description=doc.meta.description,
    )


def render_index(docs: list[Document], site_title: str = SITE_TITLE, base_url: str = BASE_URL) -> str:
    root = _site_root(base_url, "")
    rows = [
        PostRow(
            title=d.title,
            updated=d.updated.isoformat(),
            reading=_reading(d),
            href=f"{root}posts/{d.id}/index.html",
        )
        for d in sort_for_index(docs)
    ]
    return html_doc(title=site_title, site_title=site_title, root=root, body=post_index(rows))


def sort_for_index(docs: list[Document]) -> list[Document]:
    """Newest first by ``updated``; ties broken by id."""
    by_id = sorted(docs, key=lambda d: d.id)
    return sorted(by_id, key=lambda d: d.updated, reverse=True)


def build_site(
    content_dir: Path,
    out_dir: Path,
    include_drafts: bool = False,
    site_title: str = SITE_TITLE,
    base_url: str = BASE_URL,
) -> BuildReport:
    """Build the site from a content directory.

    Every document is loaded and validated before anything is written, so a
    malformed post fails the build with a ``ContentError`` listing all
    problems and leaves the previous output untouched.

    Args:
        content_dir: Directory of post files
        out_dir: Output directory (``posts/`` inside it is rebuilt)
        include_drafts: Render posts marked ``draft = true``
        site_title: Title shown in the header and on the index
        base_url: Absolute site URL for links; empty keeps them relative

    Returns:
        BuildReport with page list and warnings
    """
    store = ContentStore(content_dir)
    all_docs = store.collect(include_drafts=True)
    docs = all_docs if include_drafts else [d for d in all_docs if not d.draft]
    warnings = _content_warnings(docs)

    out_dir = out_dir.resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    posts_dir = out_dir / "posts"
    if posts_dir.exists():
        shutil.rmtree(posts_dir)

    pages: list[str] = []
    for doc in docs:
        page_dir = posts_dir / doc.id
        page_dir.mkdir(parents=True, exist_ok=True)
        (page_dir / "index.html").write_text(render_document(doc, site_title, base_url), encoding="utf-8")
        pages.append(f"posts/{doc.id}/index.html")

    (out_dir / "index.html").write_text(render_index(docs, site_title, base_url), encoding="utf-8")
    pages.append("index.html")

    return BuildReport(
        out_dir=out_dir,
        documents=len(docs),
        drafts_skipped=len(all_docs) - len(docs),
        pages=pages,
        total_bytes=_dir_size_bytes(out_dir),
        warnings=warnings,
    )


def _site_root(base_url: str, relative: str) -> str:
    return f"{base_url.rstrip('/')}/" if base_url else relative


def _content_warnings(docs: list[Document]) -> list[str]:
    warnings: list[str] = []
    titles: dict[str, str] = {}
    for doc in docs:
        if not doc.body.strip():
            warnings.append(f"{doc.id}: empty body")
        published = doc.meta.published
        if published is not None and doc.updated < published:
            warnings.append(
                f"{doc.id}: updated {doc.updated.isoformat()} is before date {published.isoformat()}"
            )
        key = doc.title.casefold()
        if key in titles:
            warnings.append(f"{doc.id}: same title as {titles[key]}")
        else:
            titles[key] = doc.id
    return warnings


def _dateline(doc: Document) -> str:
    parts = []
    published = doc.meta.published
    if published is not None and published != doc.updated:
        parts.append(f"Published {published.isoformat()}")
    parts.append(f"Updated {doc.updated.isoformat()}")
    parts.append(_reading(doc))
    return " · ".join(parts)


def _reading(doc: Document) -> str:
    minutes = doc.reading_minutes
    return f"{minutes} min read" if minutes else "no text"


def _dir_size_bytes(path: Path) -> int:
    total = 0
    for p in path.rglob("*"):
        if p.is_file():
            total += p.stat().st_size
    return total
