"""Typed dataclasses describing totw site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from totw_pages._constants import DEFAULT_LAYOUT


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Visual theming applied to generated pages."""

    site_name: str = "Tips of the Week"
    tagline: str = "Notes on language semantics"
    footer_note: str = ""


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from YAML config or the CLI."""

    title: str = "Tips of the Week"
    description: str = ""
    base_url: str = ""
    input_dir: Path = Path("content")
    output_dir: Path = Path("_site")
    templates_dir: Path | None = None
    default_layout: str = DEFAULT_LAYOUT
    index_permalink: str = "/"
    include_drafts: bool = False
    pygments_style: str = "friendly"
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)

    def with_overrides(
        self,
        *,
        input_dir: Path | None = None,
        output_dir: Path | None = None,
        templates_dir: Path | None = None,
        include_drafts: bool | None = None,
    ) -> SiteConfig:
        """Return a copy where every non-``None`` override replaces the stored value."""
        changes: dict[str, object] = {}
        if input_dir is not None:
            changes["input_dir"] = input_dir
        if output_dir is not None:
            changes["output_dir"] = output_dir
        if templates_dir is not None:
            changes["templates_dir"] = templates_dir
        if include_drafts is not None:
            changes["include_drafts"] = include_drafts
        return dc.replace(self, **changes)

    def url_for(self, permalink: str) -> str:
        """Return ``permalink`` prefixed with the configured ``base_url``."""
        return f"{self.base_url.rstrip('/')}{permalink}"


__all__ = ["SiteConfig", "SiteConfigError", "ThemeConfig"]
