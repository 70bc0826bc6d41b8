"""Named page templates and the pure document-to-HTML render step.

A :class:`TemplateSet` maps layout names to :class:`Template` records. The
default set is loaded from the Jinja templates shipped in
``totw_pages/templates``; sites may supply their own directory instead. Each
file ``<name>.jinja`` (or ``<name>.html``) becomes the layout ``<name>``,
while files starting with ``_`` are partials that layouts extend or include.

Example
-------
>>> from totw_pages.renderer.templates import TemplateSet
>>> templates = TemplateSet.packaged()
>>> sorted(templates)
['default', 'index', 'tip']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path
from types import MappingProxyType

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)
from markupsafe import Markup

from totw_pages._constants import STYLESHEET_PATH, TEMPLATE_SUFFIXES
from totw_pages.errors import IOFailure, SiteBuildError, UnknownTemplate

if typ.TYPE_CHECKING:
    from totw_pages.documents import Document
    from totw_pages.site import SiteSnapshot

    from .markup import BodyFormatter

PACKAGED_TEMPLATES = Path(__file__).resolve().parents[1] / "templates"


@dc.dataclass(frozen=True, slots=True)
class Template:
    """A named rendering function mapping a template context to HTML."""

    name: str
    render: cabc.Callable[[cabc.Mapping[str, typ.Any]], str]


class TemplateSet(cabc.Mapping[str, Template]):
    """Read-only mapping of layout names to templates."""

    def __init__(self, templates: cabc.Iterable[Template]) -> None:
        self._templates = MappingProxyType({t.name: t for t in templates})

    def __getitem__(self, name: str) -> Template:
        return self._templates[name]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    @classmethod
    def from_directory(cls, templates_dir: Path) -> TemplateSet:
        """Load every layout template found directly inside ``templates_dir``.

        Raises
        ------
        IOFailure
            If the directory does not exist.
        SiteBuildError
            If a template has a syntax error.
        """
        if not templates_dir.is_dir():
            msg = "template directory does not exist"
            raise IOFailure(msg, source=templates_dir.as_posix())
        env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        templates: list[Template] = []
        for path in sorted(templates_dir.iterdir()):
            if (
                not path.is_file()
                or path.suffix not in TEMPLATE_SUFFIXES
                or path.name.startswith(("_", "."))
            ):
                continue
            try:
                compiled = env.get_template(path.name)
            except TemplateError as exc:
                msg = f"cannot compile template: {exc}"
                raise SiteBuildError(msg, source=path.as_posix()) from exc
            templates.append(Template(name=path.stem, render=compiled.render))
        return cls(templates)

    @classmethod
    def packaged(cls) -> TemplateSet:
        """Return the templates bundled with totw_pages."""
        return cls.from_directory(PACKAGED_TEMPLATES)


def render_document(
    document: Document,
    templates: cabc.Mapping[str, Template],
    *,
    formatter: BodyFormatter,
    snapshot: SiteSnapshot,
) -> str:
    """Render ``document`` through its layout and return the page HTML.

    The call is pure: the same document, templates, and snapshot always give
    byte-identical output, and nothing is written to disk.

    Raises
    ------
    UnknownTemplate
        If ``document.layout`` has no matching template.
    SiteBuildError
        If the template fails while rendering.
    """
    try:
        template = templates[document.layout]
    except KeyError as exc:
        known = ", ".join(sorted(templates)) or "none"
        msg = f"no template named '{document.layout}' (known: {known})"
        raise UnknownTemplate(msg, source=document.source, field="layout") from exc

    navigation = snapshot.navigation
    has_stylesheet = bool(getattr(formatter, "stylesheet", None))
    context = {
        "page": document,
        "content": Markup(formatter(document, snapshot)),
        "site": snapshot.config,
        "navigation": navigation,
        "previous": navigation.previous(document.permalink),
        "next": navigation.next(document.permalink),
        "stylesheet_url": (
            snapshot.config.url_for(f"/{STYLESHEET_PATH}") if has_stylesheet else None
        ),
    }
    try:
        html = template.render(context)
    except TemplateNotFound as exc:
        msg = f"template '{template.name}' refers to missing template '{exc.name}'"
        raise UnknownTemplate(msg, source=document.source, field="layout") from exc
    except TemplateError as exc:
        msg = f"template '{template.name}' failed: {exc}"
        raise SiteBuildError(msg, source=document.source, field="layout") from exc
    if not html.endswith("\n"):
        html += "\n"
    return html


__all__ = ["PACKAGED_TEMPLATES", "Template", "TemplateSet", "render_document"]
