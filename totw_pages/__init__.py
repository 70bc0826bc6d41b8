"""Static site generator for the Tips of the Week article corpus.

This package loads content files with ``---`` delimited headers, renders them
through named Jinja layouts, and writes a static HTML tree linked by an
ordered navigation index. The ``totw`` console script wraps the pipeline.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``build_site``: Library entry point running a whole build.

Examples
--------
>>> from totw_pages import main
>>> main(["build", "content", "_site"])  # doctest: +SKIP
>>> from totw_pages import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main
from .site import build_site

__all__ = ["app", "build_site", "main"]
