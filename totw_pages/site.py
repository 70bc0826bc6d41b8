"""Assemble documents into a static site on disk.

The assembler is a single pass: pick the documents to render, build the
navigation index from the loaded set, check that every page resolves to its
own output path, render every page in memory, and only then write the tree.
Any error aborts the run before the first file is written.

Example
-------
>>> from pathlib import Path
>>> from totw_pages.config import SiteConfig
>>> from totw_pages.site import build_site
>>> config = SiteConfig(input_dir=Path("content"), output_dir=Path("_site"))
>>> result = build_site(config)  # doctest: +SKIP
>>> [path.name for path in result.written][:1]  # doctest: +SKIP
['index.html']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ
from pathlib import Path, PurePosixPath
from types import MappingProxyType

from ._constants import INDEX_LAYOUT, STYLESHEET_PATH
from .documents import Document, load_documents
from .errors import DuplicatePermalink, IOFailure
from .navigation import NavigationIndex, build_navigation
from .renderer.markup import HtmlContentRenderer
from .renderer.templates import TemplateSet, render_document

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .renderer.markup import BodyFormatter
    from .renderer.templates import Template

logger = logging.getLogger(__name__)

INDEX_SOURCE = "<navigation index>"
STYLESHEET_SOURCE = "<pygments stylesheet>"


@dc.dataclass(frozen=True, slots=True)
class SiteSnapshot:
    """Immutable view of the whole site handed to every render call.

    Attributes
    ----------
    config : SiteConfig
        Resolved site configuration.
    documents : tuple[Document, ...]
        Every loaded document, drafts included, in encounter order.
    navigation : NavigationIndex
        Ordered published documents.
    link_targets : Mapping[str, str]
        Source identifier to permalink for every page this build writes,
        used to resolve cross references.
    """

    config: SiteConfig
    documents: tuple[Document, ...]
    navigation: NavigationIndex
    link_targets: cabc.Mapping[str, str]

    @classmethod
    def capture(
        cls, config: SiteConfig, documents: cabc.Iterable[Document]
    ) -> SiteSnapshot:
        """Freeze ``documents`` together with their navigation index."""
        frozen = tuple(documents)
        return cls(
            config=config,
            documents=frozen,
            navigation=build_navigation(frozen, base_url=config.base_url),
            link_targets=MappingProxyType(
                {
                    doc.source: doc.permalink
                    for doc in frozen
                    if _is_rendered(doc, config)
                }
            ),
        )


@dc.dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a completed build."""

    written: tuple[Path, ...]
    navigation: NavigationIndex


def _is_rendered(document: Document, config: SiteConfig) -> bool:
    return document.published or config.include_drafts


def resolve_output_path(permalink: str) -> PurePosixPath:
    """Map a permalink onto a file path relative to the output directory.

    ``/tips/1`` and ``/tips/1/`` become ``tips/1/index.html``, a permalink
    that already names an ``.html`` file is kept as is, and ``/`` becomes
    ``index.html``.

    >>> resolve_output_path("/tips/1")
    PurePosixPath('tips/1/index.html')
    >>> resolve_output_path("/tips/1.html")
    PurePosixPath('tips/1.html')
    """
    relative = permalink.strip("/")
    if not relative:
        return PurePosixPath("index.html")
    path = PurePosixPath(relative)
    if not permalink.endswith("/") and path.suffix in {".html", ".htm"}:
        return path
    return path / "index.html"


class SiteAssembler:
    """Render a set of documents into an output tree."""

    def __init__(
        self,
        config: SiteConfig,
        templates: cabc.Mapping[str, Template],
        *,
        formatter: BodyFormatter | None = None,
    ) -> None:
        """Initialize the assembler.

        Parameters
        ----------
        config : SiteConfig
            Resolved site configuration; ``output_dir``, ``include_drafts``,
            and ``index_permalink`` drive the build.
        templates : Mapping[str, Template]
            Layouts shared read-only by every page.
        formatter : BodyFormatter, optional
            Body-to-HTML transform; defaults to :class:`HtmlContentRenderer`
            using ``config.pygments_style``.
        """
        self.config = config
        self.templates = templates
        self.formatter: BodyFormatter = formatter or HtmlContentRenderer(
            config.pygments_style
        )

    def build(self, documents: cabc.Iterable[Document]) -> BuildResult:
        """Render and write every selected document plus the navigation index.

        Returns
        -------
        BuildResult
            Written paths in render order and the navigation index used.

        Raises
        ------
        DuplicatePermalink
            If two pages resolve to the same output path.
        UnknownTemplate
            If a page names a layout with no template.
        IOFailure
            If an output file cannot be written.
        """
        snapshot = SiteSnapshot.capture(self.config, documents)
        pages = self._select(snapshot.documents)
        index_page = self._index_page()
        if index_page is not None:
            pages.append(index_page)
        self._check_permalinks(pages)

        rendered: list[tuple[PurePosixPath, str]] = []
        for page in pages:
            html = render_document(
                page, self.templates, formatter=self.formatter, snapshot=snapshot
            )
            rendered.append((resolve_output_path(page.permalink), html))
        stylesheet = getattr(self.formatter, "stylesheet", None)
        if stylesheet:
            rendered.append((PurePosixPath(STYLESHEET_PATH), stylesheet))

        written = tuple(self._write(relative, text) for relative, text in rendered)
        logger.info(
            "built %d page(s) into %s", len(pages), self.config.output_dir.as_posix()
        )
        return BuildResult(written=written, navigation=snapshot.navigation)

    def _select(self, documents: tuple[Document, ...]) -> list[Document]:
        selected: list[Document] = []
        for doc in documents:
            if _is_rendered(doc, self.config):
                selected.append(doc)
            else:
                logger.debug("skipping draft %s", doc.source)
        return selected

    def _index_page(self) -> Document | None:
        """Return the synthetic document that renders the navigation index."""
        if not self.config.index_permalink:
            return None
        return Document(
            title=self.config.title,
            permalink=self.config.index_permalink,
            body="",
            source=INDEX_SOURCE,
            layout=INDEX_LAYOUT,
        )

    @staticmethod
    def _check_permalinks(pages: cabc.Sequence[Document]) -> None:
        """Raise DuplicatePermalink when two pages cannot both be written.

        Two pages clash when they resolve to the same file, or when one
        page's file would have to be a directory holding the other.
        """
        claimed: dict[PurePosixPath, str] = {
            PurePosixPath(STYLESHEET_PATH): STYLESHEET_SOURCE
        }
        for page in pages:
            target = resolve_output_path(page.permalink)
            owner = claimed.get(target)
            if owner is not None:
                raise DuplicatePermalink(page.permalink, source=page.source, other=owner)
            claimed[target] = page.source
        for page in pages:
            target = resolve_output_path(page.permalink)
            for parent in target.parents:
                owner = claimed.get(parent)
                if owner is not None:
                    raise DuplicatePermalink(
                        page.permalink, source=page.source, other=owner
                    )

    def _write(self, relative: PurePosixPath, text: str) -> Path:
        output_path = self.config.output_dir.joinpath(*relative.parts)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            msg = f"cannot write output file: {exc}"
            raise IOFailure(msg, source=output_path.as_posix()) from exc
        return output_path


def build_site(
    config: SiteConfig, *, formatter: BodyFormatter | None = None
) -> BuildResult:
    """Load templates and documents for ``config`` and assemble the site."""
    templates = (
        TemplateSet.from_directory(config.templates_dir)
        if config.templates_dir
        else TemplateSet.packaged()
    )
    documents = load_documents(config.input_dir, default_layout=config.default_layout)
    assembler = SiteAssembler(config, templates, formatter=formatter)
    return assembler.build(documents)


__all__ = [
    "BuildResult",
    "SiteAssembler",
    "SiteSnapshot",
    "build_site",
    "resolve_output_path",
]
