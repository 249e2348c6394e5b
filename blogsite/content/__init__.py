"""Post files: front-matter, markdown bodies and the content store."""

from .frontmatter import FrontMatter, FrontMatterError, parse_front_matter, serialize_front_matter
from .markdown import Heading, extract_headings, markdown_to_html
from .store import ContentError, ContentStore, Document, DocumentNotFound, load_document

__all__ = [
    "ContentError",
    "ContentStore",
    "Document",
    "DocumentNotFound",
    "FrontMatter",
    "FrontMatterError",
    "Heading",
    "extract_headings",
    "load_document",
    "markdown_to_html",
    "parse_front_matter",
    "serialize_front_matter",
]
