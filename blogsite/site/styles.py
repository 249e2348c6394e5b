"""Style rules for the site and the stylesheet compiled from them.

Rules are global: every page gets the same stylesheet and there are no
per-post overrides. ``declarations_for`` answers "what does this element
look like" for a structural tag, and ``CSS`` is what pages embed.
"""

from __future__ import annotations

from dataclasses import dataclass

Declarations = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class StyleRule:
    selector: str
    declarations: Declarations

    @property
    def selectors(self) -> tuple[str, ...]:
        return tuple(s.strip() for s in self.selector.split(","))

    def css(self, indent: str = "") -> str:
        lines = [f"{indent}{self.selector} {{"]
        lines.extend(f"{indent}  {prop}: {value};" for prop, value in self.declarations)
        lines.append(f"{indent}}}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Checkpoint:
    """One keyframe: a percentage and the 3D offset reached there."""

    percent: int
    offset: tuple[str, str, str]

    @property
    def transform(self) -> str:
        x, y, z = self.offset
        return f"translate3d({x}, {y}, {z})"


@dataclass(frozen=True)
class Keyframes:
    name: str
    checkpoints: tuple[Checkpoint, ...]

    def css(self) -> str:
        lines = [f"@keyframes {self.name} {{"]
        for cp in self.checkpoints:
            lines.append(f"  {cp.percent}% {{ transform: {cp.transform}; }}")
        lines.append("}")
        return "\n".join(lines)


@dataclass(frozen=True)
class MediaBlock:
    query: str
    rules: tuple[StyleRule, ...]

    def css(self) -> str:
        lines = [f"@media {self.query} {{"]
        lines.extend(rule.css(indent="  ") for rule in self.rules)
        lines.append("}")
        return "\n".join(lines)


ROOT_VARIABLES: Declarations = (
    ("--bg", "#fdfdfc"),
    ("--fg", "#1d1f21"),
    ("--muted", "#6b6f73"),
    ("--border", "#e4e4e1"),
    ("--link", "#0b5ed7"),
    ("--code-bg", "#f4f4f2"),
    ("--accent", "#c2410c"),
    ("--sans", '-apple-system, "Segoe UI", "Helvetica Neue", Arial, sans-serif'),
    ("--mono", 'ui-monospace, "SF Mono", "Consolas", "Liberation Mono", monospace'),
    ("--page-max", "760px"),
)

# Five checkpoints; the browser interpolates between them.
BOUNCE_IN = Keyframes(
    name="bounce-in",
    checkpoints=(
        Checkpoint(0, ("0", "-3000px", "0")),
        Checkpoint(60, ("0", "25px", "0")),
        Checkpoint(75, ("0", "-10px", "0")),
        Checkpoint(90, ("0", "5px", "0")),
        Checkpoint(100, ("0", "0", "0")),
    ),
)

RULES: tuple[StyleRule, ...] = (
    StyleRule("*", (("box-sizing", "border-box"),)),
    StyleRule(
        "body",
        (
            ("font-family", "var(--sans)"),
            ("font-size", "17px"),
            ("line-height", "1.65"),
            ("max-width", "var(--page-max)"),
            ("margin", "0 auto"),
            ("padding", "2.25rem 1.5rem 3rem"),
            ("background", "var(--bg)"),
            ("color", "var(--fg)"),
            ("text-rendering", "optimizeLegibility"),
            ("-webkit-font-smoothing", "antialiased"),
        ),
    ),
    StyleRule("a", (("color", "var(--link)"), ("text-decoration", "none"))),
    StyleRule("a:hover", (("text-decoration", "underline"), ("text-underline-offset", "0.15em"))),
    StyleRule(
        "header.site",
        (
            ("display", "flex"),
            ("justify-content", "space-between"),
            ("align-items", "center"),
            ("border-bottom", "1px solid var(--border)"),
            ("padding-bottom", "0.75rem"),
            ("margin-bottom", "2rem"),
            ("gap", "0.5rem 1rem"),
            ("flex-wrap", "wrap"),
        ),
    ),
    StyleRule(
        ".logo",
        (
            ("display", "inline-block"),
            ("font-family", "var(--mono)"),
            ("font-weight", "700"),
            ("font-size", "20px"),
            ("color", "var(--accent)"),
            ("animation", f"{BOUNCE_IN.name} 1s both"),
        ),
    ),
    StyleRule("header.site nav", (("display", "flex"), ("gap", "1rem"), ("flex-wrap", "wrap"))),
    StyleRule("header.site nav a", (("color", "var(--muted)"), ("font-size", "14px"))),
    StyleRule("nav.toc", (("margin", "1rem 0 1.5rem"), ("font-size", "15px"))),
    StyleRule("h1, h2, h3", (("line-height", "1.25"), ("font-weight", "650"))),
    StyleRule("h1", (("font-size", "30px"), ("margin", "0 0 0.5rem 0"))),
    StyleRule(
        "h2",
        (
            ("font-size", "22px"),
            ("margin", "2.25rem 0 0.75rem 0"),
            ("padding-bottom", "0.25rem"),
            ("border-bottom", "1px solid var(--border)"),
        ),
    ),
    StyleRule("h3", (("font-size", "18px"), ("margin", "1.75rem 0 0.5rem 0"))),
    StyleRule("p", (("margin", "0.9rem 0"),)),
    StyleRule(".muted", (("color", "var(--muted)"), ("font-size", "14px"))),
    StyleRule(".rule, hr", (("border", "none"), ("border-top", "1px solid var(--border)"), ("margin", "1.5rem 0"))),
    StyleRule("ul, ol", (("margin", "0.75rem 0"), ("padding-left", "1.5rem"))),
    StyleRule("li", (("margin", "0.3rem 0"),)),
    StyleRule("ul.posts", (("list-style", "none"), ("padding-left", "0"))),
    StyleRule(
        "table",
        (
            ("border-collapse", "collapse"),
            ("width", "100%"),
            ("margin", "1rem 0"),
            ("font-size", "15px"),
            ("display", "block"),
            ("overflow-x", "auto"),
        ),
    ),
    StyleRule(
        "th, td",
        (
            ("border", "1px solid var(--border)"),
            ("padding", "0.4rem 0.6rem"),
            ("vertical-align", "top"),
        ),
    ),
    StyleRule("th", (("text-align", "left"), ("font-weight", "600"), ("background", "var(--code-bg)"))),
    StyleRule("tbody tr:nth-child(even)", (("background", "#fafaf8"),)),
    StyleRule("code", (("font-family", "var(--mono)"), ("font-size", "0.9em"))),
    StyleRule(
        "p code, li code, td code",
        (("background", "var(--code-bg)"), ("padding", "0.1rem 0.3rem"), ("border-radius", "3px")),
    ),
    StyleRule(
        "pre",
        (
            ("overflow-x", "auto"),
            ("margin", "1rem 0"),
            ("padding", "0.75rem 1rem"),
            ("border", "1px solid var(--border)"),
            ("border-radius", "4px"),
            ("background", "var(--code-bg)"),
            ("line-height", "1.45"),
        ),
    ),
    StyleRule(
        "blockquote",
        (
            ("margin", "1rem 0"),
            ("padding", "0 1rem"),
            ("border-left", "3px solid var(--border)"),
            ("color", "var(--muted)"),
        ),
    ),
    StyleRule("img", (("max-width", "100%"), ("height", "auto"))),
)

MEDIA: dict[str, MediaBlock] = {
    "narrow": MediaBlock(
        "(max-width: 700px)",
        (
            StyleRule("body", (("font-size", "16px"), ("padding", "1.5rem 1rem 2rem"))),
            StyleRule("h1", (("font-size", "24px"),)),
            StyleRule("header.site nav a", (("font-size", "13px"),)),
            StyleRule("pre", (("padding", "0.5rem 0.75rem"),)),
        ),
    ),
    "print": MediaBlock(
        "print",
        (
            StyleRule("body", (("background", "#fff"), ("color", "#000"), ("max-width", "none"), ("padding", "1rem"))),
            StyleRule("a", (("color", "#000"), ("text-decoration", "underline"))),
            StyleRule("header.site nav", (("display", "none"),)),
            StyleRule(".logo", (("animation", "none"),)),
        ),
    ),
    "reduced-motion": MediaBlock(
        "(prefers-reduced-motion: reduce)",
        (StyleRule(".logo", (("animation", "none"),)),),
    ),
}

# Structural element tag -> selector it is styled by.
ELEMENT_SELECTORS: dict[str, str] = {
    "body": "body",
    "header": "header.site",
    "logo": ".logo",
    "navigation": "header.site nav",
    "navigation-link": "header.site nav a",
    "table-of-contents": "nav.toc",
    "link": "a",
    "h1": "h1",
    "h2": "h2",
    "h3": "h3",
    "paragraph": "p",
    "muted": ".muted",
    "rule": "hr",
    "list": "ul",
    "ordered-list": "ol",
    "list-item": "li",
    "post-list": "ul.posts",
    "table": "table",
    "table-header": "th",
    "table-cell": "td",
    "code": "code",
    "inline-code": "p code",
    "code-block": "pre",
    "blockquote": "blockquote",
    "image": "img",
}


def selector_for(tag: str) -> str | None:
    return ELEMENT_SELECTORS.get(tag)


def declarations_for(tag: str, breakpoint: str | None = None) -> dict[str, str]:
    """Visual declarations applied to a structural element.

    Every rule whose selector list names the element's selector contributes,
    in stylesheet order; later rules win. With ``breakpoint`` the matching
    media-block overrides are applied on top. Unknown tags have no
    declarations.

    Raises:
        ValueError: unknown breakpoint name
    """
    if breakpoint is not None and breakpoint not in MEDIA:
        raise ValueError(f"unknown breakpoint {breakpoint!r} (expected one of {sorted(MEDIA)})")

    selector = ELEMENT_SELECTORS.get(tag)
    if selector is None:
        return {}

    result: dict[str, str] = {}
    for rule in RULES:
        if selector in rule.selectors:
            result.update(rule.declarations)
    if breakpoint is not None:
        for rule in MEDIA[breakpoint].rules:
            if selector in rule.selectors:
                result.update(rule.declarations)
    return result


def compile_stylesheet() -> str:
    """The full stylesheet text. Identical on every call."""
    root = StyleRule(":root", ROOT_VARIABLES)
    parts = [root.css()]
    parts.extend(rule.css() for rule in RULES)
    parts.append(BOUNCE_IN.css())
    parts.extend(block.css() for block in MEDIA.values())
    return "\n\n".join(parts) + "\n"


CSS = compile_stylesheet()
