r"""Load content files with front matter into immutable Document records.

Each content unit is a text file that opens with a ``---`` delimited header of
``key: value`` lines followed by the markup body. The header is parsed as YAML
1.2, validated against the recognised keys, and frozen into a
:class:`Document`; keys the site does not recognise are kept in
``Document.extra`` so templates can still reach them.

Example
-------
>>> from totw_pages.documents import parse_document
>>> doc = parse_document(
...     "---\ntitle: Tip 1\npermalink: /tips/1\norder: 1\n---\nHello\n",
...     source="tip-1.md",
... )
>>> (doc.title, doc.permalink, doc.order, doc.published)
('Tip 1', '/tips/1', 1, True)
"""

from __future__ import annotations

import dataclasses as dc
import logging
import math
import re
import typing as typ
from pathlib import Path
from types import MappingProxyType

import frontmatter
from frontmatter.default_handlers import YAMLHandler
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import (
    DEFAULT_LAYOUT,
    FRONT_MATTER_DELIMITER,
    RECOGNIZED_KEYS,
    REQUIRED_KEYS,
    SOURCE_SUFFIXES,
)
from .config.helpers import _coerce_bool, _optional_str
from .errors import IOFailure, MalformedMetadata

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^[+-]?\d+(\.\d+)?$")
WHITESPACE_PATTERN = re.compile(r"\s")


@dc.dataclass(frozen=True, slots=True)
class Document:
    """One content unit: validated header fields plus the markup body.

    Attributes
    ----------
    title : str
        Human readable title used in page headers and navigation.
    permalink : str
        Site-absolute output path, unique across the rendered corpus.
    body : str
        Markup text following the header block.
    source : str
        Identifier of the file the document came from, relative to the
        content root; used in error reports and link resolution.
    layout : str
        Name of the template that renders this document.
    published : bool
        ``False`` marks a draft, which is skipped unless drafts are included.
    order : int | float | None
        Navigation sort key; documents without one sort last.
    kind : str | None
        Value of the ``type`` header key, if present.
    extra : Mapping[str, Any]
        Read-only mapping of header keys outside the recognised set.
    """

    title: str
    permalink: str
    body: str
    source: str
    layout: str = DEFAULT_LAYOUT
    published: bool = True
    order: int | float | None = None
    kind: str | None = None
    extra: typ.Mapping[str, typ.Any] = dc.field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )


class RuamelYAMLHandler(YAMLHandler):
    """Front matter handler that loads headers with ruamel.yaml as YAML 1.2."""

    def load(self, fm: str, **kwargs: object) -> typ.Any:
        loader = YAML(typ="safe")
        loader.version = (1, 2)
        return loader.load(fm)


HEADER_HANDLER = RuamelYAMLHandler()


def split_front_matter(text: str, *, source: str) -> tuple[str, str]:
    """Return ``(header, body)`` split at the ``---`` delimiters.

    Raises
    ------
    MalformedMetadata
        If the text does not open with a delimiter line or the header block
        is never closed.
    """
    normalized = text.removeprefix("\ufeff").replace("\r\n", "\n")
    if not frontmatter.checks(normalized, handler=HEADER_HANDLER):
        msg = f"missing opening '{FRONT_MATTER_DELIMITER}' delimiter"
        raise MalformedMetadata(msg, source=source, field="front_matter")
    try:
        header, body = HEADER_HANDLER.split(normalized)
    except ValueError as exc:
        msg = f"missing closing '{FRONT_MATTER_DELIMITER}' delimiter"
        raise MalformedMetadata(msg, source=source, field="front_matter") from exc
    return header.strip("\n"), body.lstrip("\n")


def parse_document(
    text: str, *, source: str, default_layout: str = DEFAULT_LAYOUT
) -> Document:
    """Parse raw file content into a validated :class:`Document`.

    Parameters
    ----------
    text : str
        Full file content, header block included.
    source : str
        Identifier reported in errors and stored on the document.
    default_layout : str, optional
        Layout used when the header has no ``layout`` key.

    Returns
    -------
    Document
        Immutable record with recognised keys validated and the remainder
        stored in ``extra``.

    Raises
    ------
    MalformedMetadata
        If the delimiters are missing, the header is not a YAML mapping, a
        required key is absent, or a recognised key has an invalid value.
    """
    header_text, body = split_front_matter(text, source=source)
    header = _load_header(header_text, source=source)

    for key in REQUIRED_KEYS:
        if _optional_str(header.get(key)) is None:
            raise MalformedMetadata(
                f"required key '{key}' is missing", source=source, field=key
            )

    extra = {key: value for key, value in header.items() if key not in RECOGNIZED_KEYS}
    return Document(
        title=str(header["title"]).strip(),
        permalink=_validate_permalink(header["permalink"], source=source),
        body=body,
        source=source,
        layout=_validate_layout(header.get("layout"), default_layout, source=source),
        published=_validate_published(header, source=source),
        order=_validate_order(header.get("order"), source=source),
        kind=_optional_str(header.get("type")),
        extra=MappingProxyType(extra),
    )


def discover_sources(input_dir: Path) -> list[Path]:
    """Return content files under ``input_dir`` in deterministic order.

    Files and directories whose names start with ``_`` or ``.`` are skipped,
    so partials and editor droppings never become pages.
    """
    found: list[Path] = []
    for path in input_dir.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in SOURCE_SUFFIXES:
            continue
        relative = path.relative_to(input_dir)
        if any(part.startswith(("_", ".")) for part in relative.parts):
            continue
        found.append(path)
    return sorted(found, key=lambda item: item.relative_to(input_dir).as_posix())


def load_document(
    path: Path, *, root: Path | None = None, default_layout: str = DEFAULT_LAYOUT
) -> Document:
    """Read ``path`` and parse it, naming it relative to ``root`` when given."""
    source = path.relative_to(root).as_posix() if root else path.as_posix()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read content file: {exc}"
        raise IOFailure(msg, source=source) from exc
    document = parse_document(text, source=source, default_layout=default_layout)
    logger.debug("loaded %s -> %s", source, document.permalink)
    return document


def load_documents(
    input_dir: Path, *, default_layout: str = DEFAULT_LAYOUT
) -> tuple[Document, ...]:
    """Load every content file under ``input_dir`` in encounter order.

    Raises
    ------
    IOFailure
        If ``input_dir`` does not exist or a file cannot be read.
    MalformedMetadata
        If any file has an invalid header; loading stops at the first one.
    """
    if not input_dir.is_dir():
        msg = "content directory does not exist"
        raise IOFailure(msg, source=input_dir.as_posix())
    return tuple(
        load_document(path, root=input_dir, default_layout=default_layout)
        for path in discover_sources(input_dir)
    )


def _load_header(header_text: str, *, source: str) -> dict[str, typ.Any]:
    """Parse the header block as YAML and require a mapping."""
    try:
        loaded = HEADER_HANDLER.load(header_text)
    except YAMLError as exc:
        msg = f"header is not valid YAML: {exc}"
        raise MalformedMetadata(msg, source=source, field="front_matter") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "header must be a block of 'key: value' lines"
        raise MalformedMetadata(msg, source=source, field="front_matter")
    return {str(key): value for key, value in loaded.items()}


def _validate_permalink(value: object, *, source: str) -> str:
    """Return the permalink when it is a clean site-absolute path."""
    permalink = str(value).strip()
    problem = None
    if not permalink.startswith("/"):
        problem = "must start with '/'"
    elif "\\" in permalink or WHITESPACE_PATTERN.search(permalink):
        problem = "must not contain whitespace or backslashes"
    elif ".." in permalink.split("/"):
        problem = "must not contain '..' segments"
    if problem:
        raise MalformedMetadata(
            f"permalink '{permalink}' {problem}", source=source, field="permalink"
        )
    return permalink


def _validate_layout(value: object, default: str, *, source: str) -> str:
    if value is None:
        return default
    layout = _optional_str(value) if isinstance(value, str) else None
    if layout is None:
        msg = "layout must be a non-empty template name"
        raise MalformedMetadata(msg, source=source, field="layout")
    return layout


def _validate_published(header: typ.Mapping[str, typ.Any], *, source: str) -> bool:
    if "published" not in header or header["published"] is None:
        return True
    coerced = _coerce_bool(header["published"])
    if coerced is None:
        msg = f"published must be true or false, got {header['published']!r}"
        raise MalformedMetadata(msg, source=source, field="published")
    return coerced


def _validate_order(value: object, *, source: str) -> int | float | None:
    """Return a numeric order key, accepting numbers and numeric strings."""
    match value:
        case None:
            return None
        case bool():
            pass
        case int():
            return value
        case float() if math.isfinite(value):
            return value
        case str() as text if NUMBER_PATTERN.match(text.strip()):
            stripped = text.strip()
            return float(stripped) if "." in stripped else int(stripped)
        case _:
            pass
    msg = f"order must be a number, got {value!r}"
    raise MalformedMetadata(msg, source=source, field="order")


__all__ = [
    "Document",
    "discover_sources",
    "load_document",
    "load_documents",
    "parse_document",
    "split_front_matter",
]
