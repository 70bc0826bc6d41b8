"""Markdown body formatting with Pygments highlighting for code blocks."""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from .link_rewriter import PermalinkLinkExtension

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

    from totw_pages.documents import Document
    from totw_pages.site import SiteSnapshot
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_BLOCK_PATTERN = re.compile(
    r'<div class="codehilite">'
    r'(?=(?:(?!</pre>).)*?<code(?: class="(?:language-(?P<lang>[^"\s]+))?")?>)',
    re.DOTALL,
)


class BodyFormatter(typ.Protocol):
    """Turn a document body into HTML given the whole-site snapshot."""

    def __call__(self, document: Document, snapshot: SiteSnapshot) -> str:
        """Return the HTML for ``document.body``."""
        ...


class LanguageClassHtmlFormatter(HtmlFormatter):
    """Pygments HTML formatter that tags ``<code>`` with its ``language-*`` class.

    Codehilite hands every block's lexer name to custom formatters as
    ``lang_str``, for fenced and indented blocks alike.
    """

    def __init__(self, lang_str: str = "", **options: typ.Any) -> None:
        super().__init__(**options)
        self.lang_str = lang_str

    def _wrap_code(
        self, source: cabc.Iterable[tuple[int, str]]
    ) -> cabc.Iterator[tuple[int, str]]:
        yield 0, f'<code class="{escape(self.lang_str, quote=True)}">'
        yield from source
        yield 0, "</code>"


class HtmlContentRenderer:
    """Default body formatter: Python-Markdown with codehilite and link rewriting."""

    def __init__(self, pygments_style: str = "friendly") -> None:
        """Initialize a renderer with the Pygments style used for code blocks.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"friendly"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    def __call__(self, document: Document, snapshot: SiteSnapshot) -> str:
        """Render ``document.body``, rewriting links to other content files."""
        link_extension = PermalinkLinkExtension(
            snapshot.link_targets,
            base_dir=posixpath.dirname(document.source),
            base_url=snapshot.config.base_url,
        )
        return self.markdown(document.body, link_extension=link_extension)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, *, link_extension: Extension | None = None) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
            "toc",
        ]
        if link_extension is not None:
            extensions.append(link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                    "pygments_formatter": LanguageClassHtmlFormatter,
                },
                "toc": {"permalink": False},
            },
            output_format="html",
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html)

    @staticmethod
    def _annotate_codehilite(html: str) -> str:
        """Copy each block's lexer name onto its wrapper as ``data-language``.

        Blocks whose ``<code>`` carries no ``language-*`` class are ``text``.
        """

        def _repl(match: re.Match[str]) -> str:
            lang = match.group("lang") or "text"
            return f'<div class="codehilite" data-language="{lang}">'

        return CODEHILITE_BLOCK_PATTERN.sub(_repl, html)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Unindent fences nested in list items and drop `,attr` label suffixes."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = ["BodyFormatter", "HtmlContentRenderer"]
