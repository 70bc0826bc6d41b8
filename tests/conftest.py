"""Shared fixtures for totw_pages tests."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def make_source(
    *,
    title: str,
    permalink: str,
    body: str = "",
    **header: object,
) -> str:
    """Return file content with a front matter header and ``body``."""
    lines = ["---", f"title: {title}", f"permalink: {permalink}"]
    for key, value in header.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n" + dedent(body)


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Return an empty content directory."""
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return the (not yet created) output directory path."""
    return tmp_path / "site"


@pytest.fixture
def write_source(content_dir: Path) -> cabc.Callable[..., Path]:
    """Return a helper writing a content file relative to ``content_dir``."""

    def _write(name: str, **kwargs: typ.Any) -> Path:
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(make_source(**kwargs), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def source_text() -> cabc.Callable[..., str]:
    """Return the helper that formats a content file as text."""
    return make_source
