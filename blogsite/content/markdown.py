"""Markdown to HTML for post bodies.

A deterministic CommonMark-ish subset: fenced code (with language), ATX
headings with anchors, GFM tables, lists, blockquotes, rules, and inline
code/links/images/bold/emphasis. The goal is readable, stable output, not
perfect rendering.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_ORDERED_ITEM = re.compile(r"^\d+[.)]\s+")
_FENCE = re.compile(r"^(`{3,}|~{3,})\s*([\w+#.-]*)")
_RULE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
_TOKEN = re.compile(r"\x00(\d+)\x00")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    anchor: str


def slugify(text: str, max_len: int = 60) -> str:
    """Convert heading text to a URL fragment.

    Args:
        text: Heading text (inline markdown is stripped)
        max_len: Maximum length of slug

    Returns:
        Lowercase slug with hyphens, ``section`` when nothing survives
    """
    text = _plain_text(text).lower()
    text = text.replace("&", " and ")
    text = re.sub(r"[^a-z0-9\s_-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text).strip("-")
    if len(text) > max_len:
        text = text[:max_len].rstrip("-")
    return text or "section"


class _Anchors:
    """Hands out unique anchors within one document."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def next(self, text: str) -> str:
        base = slugify(text)
        n = self._seen.get(base, 0)
        self._seen[base] = n + 1
        return base if n == 0 else f"{base}-{n}"


def extract_headings(md: str) -> list[Heading]:
    """Headings outside code fences, with the anchors ``markdown_to_html`` assigns."""
    anchors = _Anchors()
    headings: list[Heading] = []
    fence: str | None = None
    for line in _lines(md):
        stripped = line.strip()
        if fence is not None:
            if _closes_fence(stripped, fence):
                fence = None
            continue
        fence_match = _FENCE.match(stripped)
        if fence_match:
            fence = fence_match.group(1)
            continue
        m = _HEADING.match(stripped)
        if m:
            text = m.group(2).strip()
            headings.append(Heading(level=len(m.group(1)), text=text, anchor=anchors.next(text)))
    return headings


def markdown_to_html(md: str) -> str:
    """Render markdown to an HTML fragment (empty input, empty output)."""
    lines = _lines(md)
    anchors = _Anchors()
    out: list[str] = []
    para_buf: list[str] = []

    def flush_paragraph() -> None:
        if not para_buf:
            return
        text = " ".join(s.strip() for s in para_buf if s.strip())
        if text:
            out.append(f"<p>{_inline(text)}</p>")
        para_buf.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        # Code fences
        fence_match = _FENCE.match(stripped)
        if fence_match:
            flush_paragraph()
            marker = fence_match.group(1)
            lang = fence_match.group(2)
            code_buf: list[str] = []
            i += 1
            while i < len(lines):
                if _closes_fence(lines[i].strip(), marker):
                    i += 1
                    break
                code_buf.append(lines[i])
                i += 1
            out.append(_code_block("\n".join(code_buf), lang))
            continue

        if _RULE.match(stripped):
            flush_paragraph()
            out.append("<hr>")
            i += 1
            continue

        # Table (GFM)
        if _looks_like_table_start(lines, i):
            flush_paragraph()
            table_lines: list[str] = []
            while i < len(lines) and lines[i].strip().startswith("|"):
                table_lines.append(lines[i])
                i += 1
            out.append(_table_to_html(table_lines))
            continue

        heading = _HEADING.match(stripped)
        if heading:
            flush_paragraph()
            level = len(heading.group(1))
            text = heading.group(2).strip()
            anchor = anchors.next(text)
            out.append(f'<h{level} id="{anchor}">{_inline(text)}</h{level}>')
            i += 1
            continue

        # Unordered list
        if stripped.startswith(("- ", "* ", "+ ")):
            flush_paragraph()
            out.append("<ul>")
            while i < len(lines):
                s = lines[i].strip()
                if not s.startswith(("- ", "* ", "+ ")):
                    break
                out.append(f"<li>{_inline(s[2:].strip())}</li>")
                i += 1
            out.append("</ul>")
            continue

        # Ordered list
        if _ORDERED_ITEM.match(stripped):
            flush_paragraph()
            out.append("<ol>")
            while i < len(lines):
                s = lines[i].strip()
                m = _ORDERED_ITEM.match(s)
                if not m:
                    break
                out.append(f"<li>{_inline(s[m.end():])}</li>")
                i += 1
            out.append("</ol>")
            continue

        # Blockquote
        if stripped.startswith(">"):
            flush_paragraph()
            out.append("<blockquote>")
            while i < len(lines):
                s = lines[i].strip()
                if not s.startswith(">"):
                    break
                q = s[1:].strip()
                if q:
                    out.append(f"<p>{_inline(q)}</p>")
                i += 1
            out.append("</blockquote>")
            continue

        if not stripped:
            flush_paragraph()
            i += 1
            continue

        para_buf.append(line)
        i += 1

    flush_paragraph()
    return "\n".join(out)


def _lines(md: str) -> list[str]:
    if not md:
        return []
    return md.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _closes_fence(line: str, marker: str) -> bool:
    return len(line) >= len(marker) and not line.strip(marker[0])


def _code_block(code: str, lang: str) -> str:
    cls = f' class="language-{_escape_attr(lang.lower())}"' if lang else ""
    return f"<pre><code{cls}>{_escape_block(code)}</code></pre>"


def _escape_block(text: str) -> str:
    # Block escaping (pre/code) keeps newlines.
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(text: str) -> str:
    return _escape_block(text).replace('"', "&quot;")


def _inline(text: str) -> str:
    # Placeholder-based inline renderer (escape-by-default). Stashed HTML may
    # itself hold earlier tokens, so resolution repeats until none are left.
    text = text.replace("\x00", "")
    replacements: list[str] = []

    def stash(html: str) -> str:
        token = f"\x00{len(replacements)}\x00"
        replacements.append(html)
        return token

    text = re.sub(r"`([^`]+)`", lambda m: stash(f"<code>{_escape_block(m.group(1))}</code>"), text)

    def _image_repl(match: re.Match) -> str:
        src = _safe_href(match.group(2))
        alt = match.group(1)
        if not src:
            return alt
        return stash(f'<img src="{_escape_attr(src)}" alt="{_escape_attr(alt)}">')

    text = re.sub(r"!\[([^\]]*)\]\(([^)\s]+)\)", _image_repl, text)

    def _link_repl(match: re.Match) -> str:
        href = _safe_href(match.group(2))
        label = match.group(1)
        if not href:
            return label
        return stash(f'<a href="{_escape_attr(href)}">{_escape_block(label)}</a>')

    text = re.sub(r"\[([^\]]+)\]\(([^)\s]+)\)", _link_repl, text)
    text = re.sub(
        r"\*\*([^*]+)\*\*",
        lambda m: stash(f"<strong>{_escape_block(m.group(1))}</strong>"),
        text,
    )
    text = re.sub(
        r"(?<![\w*])\*([^*\s][^*]*?)\*(?![\w*])|(?<!\w)_([^_\s][^_]*?)_(?!\w)",
        lambda m: stash(f"<em>{_escape_block(m.group(1) or m.group(2))}</em>"),
        text,
    )

    escaped = _escape_block(text)
    while _TOKEN.search(escaped):
        escaped = _TOKEN.sub(lambda m: replacements[int(m.group(1))], escaped)
    return escaped


def _plain_text(text: str) -> str:
    text = re.sub(r"!?\[([^\]]*)\]\([^)]*\)", r"\1", text)
    return re.sub(r"[`*_]", "", text)


def _safe_href(href: str | None) -> str | None:
    if href is None:
        return None
    cleaned = href.strip()
    if not cleaned:
        return None
    if cleaned.lower().startswith(("javascript:", "data:", "vbscript:")):
        return None
    return cleaned


def _looks_like_table_start(lines: list[str], i: int) -> bool:
    if i + 1 >= len(lines):
        return False
    header = lines[i].strip()
    sep = lines[i + 1].strip()
    if not header.startswith("|") or not sep.startswith("|"):
        return False
    # Separator row contains --- columns
    return "---" in sep


def _split_row(line: str) -> list[str]:
    return [p.strip() for p in re.split(r"(?<!\\)\|", line.strip().strip("|"))]


def _table_to_html(table_lines: list[str]) -> str:
    rows = [_split_row(line) for line in table_lines if line.strip().startswith("|")]
    if len(rows) < 2:
        return "<pre>" + _escape_block("\n".join(table_lines)) + "</pre>"

    header = rows[0]
    aligns = [_alignment(cell) for cell in rows[1]]

    def cell(tag: str, text: str, col: int) -> str:
        align = aligns[col] if col < len(aligns) else None
        style = f' style="text-align: {align}"' if align else ""
        text = text.replace("\\|", "|")
        return f"<{tag}{style}>{_inline(text)}</{tag}>"

    out = ["<table>", "<thead>", "<tr>"]
    out.extend(cell("th", h, col) for col, h in enumerate(header))
    out.extend(["</tr>", "</thead>", "<tbody>"])
    for r in rows[2:]:
        out.append("<tr>")
        out.extend(cell("td", c, col) for col, c in enumerate(r))
        out.append("</tr>")
    out.extend(["</tbody>", "</table>"])
    return "\n".join(out)


def _alignment(sep_cell: str) -> str | None:
    left = sep_cell.startswith(":")
    right = sep_cell.endswith(":")
    if left and right:
        return "center"
    if right:
        return "right"
    return None
