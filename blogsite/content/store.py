"""Read-only store of blog posts on disk."""

from __future__ import annotations

import math
from datetime import date
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..config import CONTENT_DIR, DOCUMENT_SUFFIX, SECTION_INDEX_NAME, WORDS_PER_MINUTE
from .frontmatter import FrontMatter, FrontMatterError, read_front_matter, render_document_text
from .markdown import Heading, extract_headings


class DocumentNotFound(LookupError):
    """Raised when a document id does not exist in the store."""

    def __init__(self, document_id: str, root: Path):
        super().__init__(document_id)
        self.document_id = document_id
        self.root = root

    def __str__(self) -> str:
        return f"Document {self.document_id!r} not found in {self.root}"


class ContentError(Exception):
    """One or more documents could not be loaded."""

    def __init__(self, problems: list[str]):
        super().__init__(problems)
        self.problems = list(problems)

    def __str__(self) -> str:
        lines = [f"{len(self.problems)} problem(s) in content:"]
        lines.extend(f"  - {p}" for p in self.problems)
        return "\n".join(lines)


class Document(BaseModel):
    """A parsed post: metadata plus markdown body."""

    model_config = ConfigDict(frozen=True)

    id: str
    meta: FrontMatter
    body: str = ""
    source_path: Path | None = None
    source_format: Literal["toml", "yaml"] = "toml"

    @property
    def title(self) -> str:
        return self.meta.title

    @property
    def updated(self) -> date:
        return self.meta.updated

    @property
    def draft(self) -> bool:
        return self.meta.draft

    @property
    def word_count(self) -> int:
        return len(self.body.split())

    @property
    def reading_minutes(self) -> int:
        words = self.word_count
        return math.ceil(words / WORDS_PER_MINUTE) if words else 0

    @property
    def headings(self) -> list[Heading]:
        return extract_headings(self.body)

    def to_text(self) -> str:
        """File text for this document, in the format it was read from."""
        return render_document_text(self.meta, self.body, self.source_format)


def load_document(path: Path) -> Document:
    """Parse a single document file; the id is the file stem."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FrontMatterError(f"unreadable file: {e}", path) from e

    fmt, meta, body = read_front_matter(text, path)
    return Document(id=path.stem, meta=meta, body=body, source_path=path, source_format=fmt)


class ContentStore:
    """Documents under a content directory, in stable filename order.

    Files are ``*.md`` anywhere below ``root``; ``_index.md`` section files
    are skipped. Date-prefixed filenames therefore list chronologically.
    """

    def __init__(self, root: Path | None = None):
        self.root = Path(root) if root is not None else CONTENT_DIR

    def paths(self) -> list[Path]:
        if not self.root.is_dir():
            return []
        found = [
            p
            for p in self.root.rglob(f"*{DOCUMENT_SUFFIX}")
            if p.is_file() and p.name != SECTION_INDEX_NAME
        ]
        return sorted(found, key=lambda p: p.relative_to(self.root).as_posix())

    def list_documents(self, include_drafts: bool = True) -> list[Document]:
        """All documents; the first malformed file raises ``FrontMatterError``."""
        docs = [load_document(p) for p in self.paths()]
        if include_drafts:
            return docs
        return [d for d in docs if not d.draft]

    def collect(self, include_drafts: bool = False) -> list[Document]:
        """Like ``list_documents`` but reports every problem at once.

        Raises:
            ContentError: listing each malformed file and duplicate id
        """
        problems: list[str] = []
        docs: list[Document] = []
        seen: dict[str, Path] = {}

        for path in self.paths():
            try:
                doc = load_document(path)
            except FrontMatterError as e:
                problems.append(str(e))
                continue
            if doc.id in seen:
                problems.append(f"{path}: duplicate document id {doc.id!r} (also {seen[doc.id]})")
                continue
            seen[doc.id] = path
            docs.append(doc)

        if problems:
            raise ContentError(problems)
        if include_drafts:
            return docs
        return [d for d in docs if not d.draft]

    def read(self, document_id: str) -> Document:
        """Return the document with this id.

        Raises:
            DocumentNotFound: unknown id, or an id that is not a bare file stem
        """
        if not _is_plain_id(document_id):
            raise DocumentNotFound(document_id, self.root)
        for path in self.paths():
            if path.stem == document_id:
                return load_document(path)
        raise DocumentNotFound(document_id, self.root)

    def __contains__(self, document_id: object) -> bool:
        if not isinstance(document_id, str) or not _is_plain_id(document_id):
            return False
        return any(p.stem == document_id for p in self.paths())


def _is_plain_id(document_id: str) -> bool:
    if not document_id or document_id.startswith("."):
        return False
    return "/" not in document_id and "\\" not in document_id
