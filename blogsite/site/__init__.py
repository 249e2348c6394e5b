"""Style layer and page rendering."""

from .build import BuildReport, build_site, render_document
from .styles import BOUNCE_IN, CSS, StyleRule, compile_stylesheet, declarations_for

__all__ = [
    "BOUNCE_IN",
    "BuildReport",
    "CSS",
    "StyleRule",
    "build_site",
    "compile_stylesheet",
    "declarations_for",
    "render_document",
]
