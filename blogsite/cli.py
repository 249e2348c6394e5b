"""CLI entry point for blogsite."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import BASE_URL, CONTENT_DIR, OUTPUT_DIR, SITE_TITLE


def app(argv: list[str] | None = None) -> None:
    """Console script entrypoint."""
    raise SystemExit(main(argv))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="blogsite",
        description="Blog posts and the stylesheet that renders them.",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"blogsite {__version__}",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("list", help="List documents in the content store")
    p_list.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_list.add_argument("--no-drafts", action="store_true", help="Hide draft posts")

    p_show = sub.add_parser("show", help="Print one document")
    p_show.add_argument("id", help="Document id (file name without .md)")
    p_show.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_show.add_argument("--html", action="store_true", help="Print the rendered page instead")

    p_css = sub.add_parser("css", help="Print the compiled stylesheet")
    p_css.add_argument("--element", "-e", help="Only show declarations for one element tag")
    p_css.add_argument("--breakpoint", "-b", help="Apply a media breakpoint (narrow, print, reduced-motion)")

    p_build = sub.add_parser("build", help="Render all posts into a static site")
    p_build.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_build.add_argument("--out", "-o", type=Path, default=OUTPUT_DIR, help="Output directory")
    p_build.add_argument("--drafts", action="store_true", help="Include draft posts")
    p_build.add_argument("--title", default=SITE_TITLE, help="Site title")
    p_build.add_argument("--base-url", default=BASE_URL, help="Absolute site URL for links (default: relative)")

    args = parser.parse_args(argv)

    if args.cmd == "list":
        return _cmd_list(args)
    if args.cmd == "show":
        return _cmd_show(args)
    if args.cmd == "css":
        return _cmd_css(args)
    if args.cmd == "build":
        return _cmd_build(args)

    parser.print_help()
    return 2


def _cmd_list(args: Any) -> int:
    from .content.frontmatter import FrontMatterError
    from .content.store import ContentStore

    store = ContentStore(args.content)
    try:
        docs = store.list_documents(include_drafts=not args.no_drafts)
    except FrontMatterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not docs:
        print(f"No documents in {store.root}")
        return 0

    for d in docs:
        flag = " [draft]" if d.draft else ""
        print(f"  {d.updated.isoformat()}  {d.id:40}  {d.title}{flag}")
    return 0


def _cmd_show(args: Any) -> int:
    from .content.frontmatter import FrontMatterError
    from .content.store import ContentStore, DocumentNotFound
    from .site.build import render_document

    store = ContentStore(args.content)
    try:
        doc = store.read(args.id)
        text = render_document(doc) if args.html else doc.to_text()
    except (DocumentNotFound, FrontMatterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    return 0


def _cmd_css(args: Any) -> int:
    from .site.styles import CSS, declarations_for, selector_for

    if not args.element:
        if args.breakpoint:
            print("Error: --breakpoint requires --element", file=sys.stderr)
            return 2
        sys.stdout.write(CSS)
        return 0

    selector = selector_for(args.element)
    if selector is None:
        print(f"Error: unknown element {args.element!r}", file=sys.stderr)
        return 1
    try:
        decls = declarations_for(args.element, breakpoint=args.breakpoint)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"{selector} {{")
    for prop, value in decls.items():
        print(f"  {prop}: {value};")
    print("}")
    return 0


def _cmd_build(args: Any) -> int:
    from .content.store import ContentError
    from .site.build import build_site

    try:
        report = build_site(
            args.content,
            args.out,
            include_drafts=bool(args.drafts),
            site_title=args.title,
            base_url=args.base_url,
        )
    except ContentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("✓ Site generated")
    print(f"  Output: {report.out_dir}")
    print(f"  Posts: {report.documents}")
    if report.drafts_skipped:
        print(f"  Drafts skipped: {report.drafts_skipped}")
    print(f"  Size: {report.total_bytes / 1024:.1f} KB")

    if report.warnings:
        print(f"\nWarnings ({len(report.warnings)}):")
        for w in report.warnings[:10]:
            print(f"  - {w}")
        if len(report.warnings) > 10:
            print(f"  ... and {len(report.warnings) - 10} more")
    return 0


if __name__ == "__main__":
    app()
