"""Tests for the ``totw`` command line entry point."""

from __future__ import annotations

import typing as typ

import pytest

from totw_pages import cli

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def test_build_reports_written_files(
    write_source: cabc.Callable[..., Path],
    content_dir: Path,
    output_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Each generated file is reported on stdout."""
    write_source("tip-1.md", title="Tip 1", permalink="/tips/1", order=1, body="Hello")
    cli.build(content_dir, output_dir)
    out = capsys.readouterr().out.splitlines()
    assert any(line.endswith("tips/1/index.html") for line in out)
    assert all(line.startswith("wrote ") for line in out)


def test_drafts_flag_and_templates_dir(
    write_source: cabc.Callable[..., Path],
    content_dir: Path,
    output_dir: Path,
    tmp_path: Path,
) -> None:
    """CLI flags override the configuration file."""
    layouts = tmp_path / "layouts"
    layouts.mkdir()
    (layouts / "default.html").write_text("[{{ page.title }}]", encoding="utf-8")
    (layouts / "index.html").write_text("{{ navigation|length }}", encoding="utf-8")
    write_source("draft.md", title="Draft", permalink="/draft", published=False)
    config_path = tmp_path / "site.yaml"
    config_path.write_text("include_drafts: false\n", encoding="utf-8")

    cli.build(
        content_dir,
        output_dir,
        drafts=True,
        templates_dir=layouts,
        config=config_path,
    )
    assert (output_dir / "draft" / "index.html").read_text(encoding="utf-8") == "[Draft]\n"
    assert (output_dir / "index.html").read_text(encoding="utf-8") == "0\n"


def test_config_supplies_directories(
    write_source: cabc.Callable[..., Path], content_dir: Path, tmp_path: Path
) -> None:
    """Without positional arguments the configuration file names the folders."""
    write_source("a.md", title="A", permalink="/a")
    config_path = tmp_path / "site.yaml"
    config_path.write_text("input_dir: content\noutput_dir: public\n", encoding="utf-8")
    cli.build(config=config_path)
    assert (tmp_path / "public" / "a" / "index.html").exists()


def test_build_failure_exits_non_zero(
    write_source: cabc.Callable[..., Path],
    content_dir: Path,
    output_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Render failures print the document and field, then exit with status 1."""
    write_source("one.md", title="One", permalink="/tips/1")
    write_source("two.md", title="Two", permalink="/tips/1")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["build", str(content_dir), str(output_dir)])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("error: two.md [permalink]:")
    assert not output_dir.exists()


def test_malformed_header_exits_non_zero(
    content_dir: Path, output_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Parse failures are fatal too."""
    (content_dir / "bad.md").write_text("---\ntitle: Bad\n---\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.build(content_dir, output_dir)
    assert excinfo.value.code == 1
    assert "bad.md [permalink]" in capsys.readouterr().err


def test_invalid_config_exits_non_zero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Configuration errors are reported like build errors."""
    config_path = tmp_path / "site.yaml"
    config_path.write_text("unknown_key: 1\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.build(config=config_path)
    assert excinfo.value.code == 1
    assert "unknown_key" in capsys.readouterr().err
