"""Front-matter parsing and serialization.

A post file starts with a delimited metadata block followed by the markdown
body. Two block styles are understood:

    +++                      ---
    title = "..."            title: ...
    updated = 2022-03-07     updated: 2022-03-07
    +++                      ---

TOML (``+++``) is the native format of the blog; YAML (``---``) is accepted
for posts carried over from other generators.
"""

from __future__ import annotations

import json
import re
import tomllib
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import TOML_DELIMITER, YAML_DELIMITER

FORMATS = {"toml": TOML_DELIMITER, "yaml": YAML_DELIMITER}

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class FrontMatterError(ValueError):
    """Raised for a missing, unterminated or invalid metadata block."""

    def __init__(self, reason: str, path: Path | str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.reason
        return f"{self.path}: {self.reason}"


class FrontMatter(BaseModel):
    """Validated document metadata."""

    model_config = ConfigDict(frozen=True)

    title: str
    updated: date
    published: date | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    draft: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("updated", "published", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        return coerce_date(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value


def coerce_date(value: Any) -> Any:
    """Normalise TOML/YAML date-ish values to ``datetime.date``.

    Datetimes lose their time component. Strings must be ISO 8601. Anything
    else is passed through for pydantic to reject.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date) or value is None:
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise ValueError(f"invalid date {value!r} (expected YYYY-MM-DD)") from None
    return value


def split_front_matter(text: str, path: Path | str | None = None) -> tuple[str, str, str]:
    """Split file text into ``(format, raw_metadata, body)``."""
    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    first, _, rest = text.partition("\n")
    opening = first.strip()

    fmt = next((name for name, delim in FORMATS.items() if delim == opening), None)
    if fmt is None:
        raise FrontMatterError(
            f"missing front-matter block (expected {TOML_DELIMITER!r} or "
            f"{YAML_DELIMITER!r} on the first line)",
            path,
        )

    lines = rest.split("\n")
    for i, line in enumerate(lines):
        if line.rstrip() == opening:
            raw = "\n".join(lines[:i])
            body = "\n".join(lines[i + 1 :]).lstrip("\n")
            return fmt, raw, body

    raise FrontMatterError(f"unterminated front-matter block (no closing {opening!r})", path)


def load_metadata(fmt: str, raw: str, path: Path | str | None = None) -> dict[str, Any]:
    """Decode a raw metadata block to a mapping."""
    if fmt == "toml":
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as e:
            raise FrontMatterError(f"invalid TOML front-matter: {e}", path) from e

    if fmt == "yaml":
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise FrontMatterError(f"invalid YAML front-matter: {e}", path) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FrontMatterError("YAML front-matter must be a mapping", path)
        return data

    raise FrontMatterError(f"unknown front-matter format {fmt!r}", path)


def front_matter_from_mapping(raw: dict[str, Any], path: Path | str | None = None) -> FrontMatter:
    """Validate a decoded metadata mapping.

    ``updated`` falls back to ``date`` when absent. Tags are read from
    ``tags`` or a ``taxonomies.tags`` table. Unrecognised keys and the
    ``extra`` table end up in ``FrontMatter.extra``.
    """
    data = dict(raw)

    published = data.pop("date", None)
    updated = data.pop("updated", None)
    if updated is None:
        updated = published
    if updated is None:
        raise FrontMatterError("missing required field 'updated'", path)
    if "title" not in data:
        raise FrontMatterError("missing required field 'title'", path)

    tags = data.pop("tags", None)
    taxonomies = data.pop("taxonomies", None)
    if tags is None and isinstance(taxonomies, dict):
        tags = taxonomies.get("tags")
    elif taxonomies is not None:
        data["taxonomies"] = taxonomies

    explicit_extra = data.pop("extra", None) or {}
    if not isinstance(explicit_extra, dict):
        raise FrontMatterError("'extra' must be a table", path)

    title = data.pop("title")
    description = data.pop("description", None)
    draft = data.pop("draft", False)
    extra = {**data, **explicit_extra}

    try:
        return FrontMatter(
            title=title,
            updated=updated,
            published=published,
            description=description,
            tags=tags,
            draft=draft,
            extra=extra,
        )
    except ValidationError as e:
        raise FrontMatterError(_describe_validation(e), path) from e


def read_front_matter(text: str, path: Path | str | None = None) -> tuple[str, FrontMatter, str]:
    """Parse file text into ``(format, metadata, body)``."""
    fmt, raw, body = split_front_matter(text, path)
    meta = front_matter_from_mapping(load_metadata(fmt, raw, path), path)
    return fmt, meta, body


def parse_front_matter(text: str, path: Path | str | None = None) -> tuple[FrontMatter, str]:
    """Parse file text into validated metadata and the markdown body."""
    _, meta, body = read_front_matter(text, path)
    return meta, body


def front_matter_to_mapping(meta: FrontMatter) -> dict[str, Any]:
    """Inverse of ``front_matter_from_mapping`` (stable key order)."""
    data: dict[str, Any] = {"title": meta.title}
    if meta.description is not None:
        data["description"] = meta.description
    if meta.published is not None:
        data["date"] = meta.published
    data["updated"] = meta.updated
    if meta.draft:
        data["draft"] = True
    if meta.tags:
        data["tags"] = list(meta.tags)
    if meta.extra:
        data["extra"] = dict(meta.extra)
    return data


def serialize_front_matter(meta: FrontMatter, fmt: str = "toml") -> str:
    """Render metadata as a delimited block, ending with a newline."""
    if fmt not in FORMATS:
        raise FrontMatterError(f"unknown front-matter format {fmt!r}")
    delim = FORMATS[fmt]
    data = front_matter_to_mapping(meta)

    if fmt == "yaml":
        inner = yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    else:
        inner = _dump_toml(data)

    return f"{delim}\n{inner.rstrip()}\n{delim}\n"


def render_document_text(meta: FrontMatter, body: str, fmt: str = "toml") -> str:
    """Full file text: metadata block, blank line, body."""
    text = serialize_front_matter(meta, fmt)
    if body:
        text += "\n" + body.rstrip("\n") + "\n"
    return text


def _describe_validation(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "front-matter"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _dump_toml(data: dict[str, Any]) -> str:
    # Tables must follow every plain key in TOML. TOML has no null, so None
    # values are left out.
    lines: list[str] = []
    tables: list[tuple[str, dict[str, Any]]] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            tables.append((key, value))
        else:
            lines.append(f"{_toml_key(key)} = {_toml_value(value)}")

    for name, table in tables:
        lines.append("")
        lines.append(f"[{_toml_key(name)}]")
        for key, value in table.items():
            if value is None:
                continue
            lines.append(f"{_toml_key(key)} = {_toml_value(value)}")

    return "\n".join(lines) + "\n"


def _toml_key(key: str) -> str:
    if _BARE_KEY.match(key):
        return key
    return _toml_string(key)


def _toml_string(text: str) -> str:
    # JSON escapes are a subset of TOML basic-string escapes, except DEL.
    return json.dumps(text, ensure_ascii=False).replace("\x7f", "\\u007F")


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, str):
        return _toml_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value if v is not None) + "]"
    if isinstance(value, dict):
        items = ", ".join(
            f"{_toml_key(k)} = {_toml_value(v)}" for k, v in value.items() if v is not None
        )
        return "{ " + items + " }" if items else "{}"
    raise FrontMatterError(f"cannot serialize {type(value).__name__} value to TOML")
