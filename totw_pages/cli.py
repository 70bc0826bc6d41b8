"""Cyclopts CLI entrypoint for building the Tips of the Week site.

The ``totw`` console script defined here loads the optional site
configuration, applies command-line overrides, and runs the build. Every
written file is reported on stdout; any parse, render, or I/O failure is
reported on stderr and exits with status 1 before a single page is written.

Examples
--------
Build the site from ``content`` into ``_site``:

>>> from totw_pages.cli import main
>>> main(["build", "content", "_site"])  # doctest: +SKIP

Include drafts and use a custom template directory:

>>> from totw_pages.cli import app
>>> app(
...     ["build", "content", "_site", "--drafts", "--templates-dir", "layouts"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import SiteConfig, SiteConfigError, load_site_config
from .errors import SiteBuildError
from .site import build_site

app = App(name="totw", config=cyclopts.config.Env("TOTW_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> typ.NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(1)


@app.command(help="Render the content directory into a static HTML tree.")
def build(
    input_dir: typ.Annotated[
        Path | None, Parameter(help="Directory holding the content files")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Directory receiving the generated site")
    ] = None,
    *,
    drafts: typ.Annotated[
        bool, Parameter(help="Also render documents marked 'published: false'")
    ] = False,
    templates_dir: typ.Annotated[
        Path | None, Parameter(help="Directory of layout templates")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to a site.yaml configuration file")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log every loaded document")] = False,
) -> None:
    """Build the site for the requested directories.

    Parameters
    ----------
    input_dir : Path or None, optional
        Content directory; overrides ``input_dir`` from the configuration.
    output_dir : Path or None, optional
        Output directory; overrides ``output_dir`` from the configuration.
    drafts : bool, optional
        Render unpublished documents as well. Drafts never enter the
        navigation index.
    templates_dir : Path or None, optional
        Layout directory replacing the packaged templates.
    config : Path or None, optional
        Site configuration file; defaults apply when omitted.
    verbose : bool, optional
        Emit debug logging for each loaded document and skipped draft.

    Returns
    -------
    None
        Writes the site and prints each generated path.

    Raises
    ------
    SystemExit
        With status 1 when the configuration is invalid or the build fails.
    """
    _configure_logging(verbose=verbose)
    try:
        site_config = load_site_config(config) if config else SiteConfig()
    except (FileNotFoundError, SiteConfigError) as exc:
        _fail(str(exc))

    site_config = site_config.with_overrides(
        input_dir=input_dir,
        output_dir=output_dir,
        templates_dir=templates_dir,
        include_drafts=True if drafts else None,
    )
    try:
        result = build_site(site_config)
    except SiteBuildError as exc:
        _fail(str(exc))
    for path in result.written:
        print(f"wrote {_format_path(path)}")


def main(argv: list[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers the ``totw`` console command.

    Examples
    --------
    >>> main(["build", "--help"])  # doctest: +SKIP
    """
    app(argv)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
