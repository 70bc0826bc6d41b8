"""Unit tests for the front matter loader.

These tests cover delimiter splitting, header validation, overflow keys, and
directory discovery. Each failure case asserts the ``field`` recorded on the
raised :class:`~totw_pages.errors.MalformedMetadata` so authors can locate the
broken header key.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from totw_pages.documents import (
    Document,
    discover_sources,
    load_documents,
    parse_document,
    split_front_matter,
)
from totw_pages.errors import IOFailure, MalformedMetadata

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def test_parse_document_reads_recognised_keys() -> None:
    """A complete header populates every typed field."""
    text = (
        "---\n"
        "title: Tip 1\n"
        "permalink: /tips/1\n"
        "order: 1\n"
        "published: true\n"
        "layout: tip\n"
        "type: markdown\n"
        "---\n"
        "Hello\n"
    )
    doc = parse_document(text, source="tip-1.md")
    assert doc == Document(
        title="Tip 1",
        permalink="/tips/1",
        body="Hello\n",
        source="tip-1.md",
        layout="tip",
        published=True,
        order=1,
        kind="markdown",
    )


def test_missing_layout_uses_default() -> None:
    """Documents without a layout fall back to the configured default."""
    text = "---\ntitle: T\npermalink: /t\n---\nbody\n"
    assert parse_document(text, source="t.md").layout == "default"
    assert parse_document(text, source="t.md", default_layout="tip").layout == "tip"


def test_unknown_keys_land_in_read_only_extra() -> None:
    """Unrecognised header keys are kept but cannot be mutated."""
    text = "---\ntitle: T\npermalink: /t\nauthor: jdoe\n---\n"
    doc = parse_document(text, source="t.md")
    assert dict(doc.extra) == {"author": "jdoe"}
    with pytest.raises(TypeError):
        doc.extra["author"] = "someone"  # type: ignore[index]


def test_document_is_frozen() -> None:
    """Documents are immutable once loaded."""
    doc = parse_document("---\ntitle: T\npermalink: /t\n---\n", source="t.md")
    with pytest.raises(dc.FrozenInstanceError):
        doc.title = "changed"  # type: ignore[misc]


def test_split_handles_bom_and_crlf() -> None:
    """A BOM and Windows line endings do not hide the delimiters."""
    header, body = split_front_matter(
        "\ufeff---\r\ntitle: T\r\n---\r\n\r\nBody\r\n", source="t.md"
    )
    assert header == "title: T"
    assert body == "Body\n"


def test_only_the_first_delimiter_pair_ends_the_header() -> None:
    """Later rules made of dashes stay in the body."""
    header, body = split_front_matter(
        "---\ntitle: T\n---\nIntro\n\n---\n\nMore\n", source="t.md"
    )
    assert header == "title: T"
    assert body == "Intro\n\n---\n\nMore\n"


@pytest.mark.parametrize(
    ("text", "field"),
    [
        ("title: T\npermalink: /t\n", "front_matter"),
        ("---\ntitle: T\npermalink: /t\n", "front_matter"),
        ("---\n- one\n- two\n---\n", "front_matter"),
        ("---\ntitle: a: b\n---\n", "front_matter"),
        ("---\npermalink: /t\n---\n", "title"),
        ("---\ntitle: T\n---\n", "permalink"),
        ("---\ntitle: '  '\npermalink: /t\n---\n", "title"),
        ("---\ntitle: T\npermalink: tips/1\n---\n", "permalink"),
        ("---\ntitle: T\npermalink: /a/../b\n---\n", "permalink"),
        ("---\ntitle: T\npermalink: /a b\n---\n", "permalink"),
        ("---\ntitle: T\npermalink: /t\npublished: maybe\n---\n", "published"),
        ("---\ntitle: T\npermalink: /t\norder: first\n---\n", "order"),
        ("---\ntitle: T\npermalink: /t\norder: true\n---\n", "order"),
        ("---\ntitle: T\npermalink: /t\norder: .nan\n---\n", "order"),
        ("---\ntitle: T\npermalink: /t\norder: -.inf\n---\n", "order"),
        ("---\ntitle: T\npermalink: /t\nlayout: 5\n---\n", "layout"),
    ],
)
def test_malformed_headers_name_the_field(text: str, field: str) -> None:
    """Every validation failure reports the source and offending field."""
    with pytest.raises(MalformedMetadata) as excinfo:
        parse_document(text, source="bad.md")
    assert excinfo.value.field == field
    assert excinfo.value.source == "bad.md"
    assert "bad.md" in str(excinfo.value)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), ("'7'", 7), ("2.5", 2.5), ("'1.5'", 1.5), ("-1", -1)],
)
def test_order_accepts_numbers_and_numeric_strings(raw: str, expected: float) -> None:
    """Numeric order keys survive quoting."""
    text = f"---\ntitle: T\npermalink: /t\norder: {raw}\n---\n"
    assert parse_document(text, source="t.md").order == expected


@pytest.mark.parametrize(("raw", "expected"), [("false", False), ("'no'", False), ("Yes", True)])
def test_published_accepts_word_booleans(raw: str, expected: bool) -> None:  # noqa: FBT001
    """Older front matter spells booleans as yes/no."""
    text = f"---\ntitle: T\npermalink: /t\npublished: {raw}\n---\n"
    assert parse_document(text, source="t.md").published is expected


def test_discover_sources_skips_private_entries(content_dir: Path) -> None:
    """Underscore and dot prefixed paths and unknown suffixes are ignored."""
    for name in ("b.md", "a.markdown", "sub/c.html", "_drafts/d.md", ".e.md", "f.txt"):
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")
    found = [p.relative_to(content_dir).as_posix() for p in discover_sources(content_dir)]
    assert found == ["a.markdown", "b.md", "sub/c.html"]


def test_load_documents_names_sources_relative_to_root(
    write_source: cabc.Callable[..., Path], content_dir: Path
) -> None:
    """Sources are reported relative to the content root, in sorted order."""
    write_source("tips/02.md", title="Two", permalink="/tips/2")
    write_source("tips/01.md", title="One", permalink="/tips/1")
    docs = load_documents(content_dir)
    assert [doc.source for doc in docs] == ["tips/01.md", "tips/02.md"]


def test_load_documents_stops_at_first_malformed_file(
    content_dir: Path, write_source: cabc.Callable[..., Path]
) -> None:
    """A single broken header aborts loading with its path."""
    write_source("good.md", title="Good", permalink="/good")
    (content_dir / "zz-bad.md").write_text("no header here\n", encoding="utf-8")
    with pytest.raises(MalformedMetadata) as excinfo:
        load_documents(content_dir)
    assert excinfo.value.source == "zz-bad.md"


def test_load_documents_requires_directory(tmp_path: Path) -> None:
    """A missing content directory is an I/O failure."""
    with pytest.raises(IOFailure):
        load_documents(tmp_path / "missing")


def test_undecodable_file_is_io_failure(content_dir: Path) -> None:
    """Non UTF-8 content cannot be read."""
    (content_dir / "latin.md").write_bytes(b"---\ntitle: caf\xe9\n---\n")
    with pytest.raises(IOFailure) as excinfo:
        load_documents(content_dir)
    assert excinfo.value.source == "latin.md"
