"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import _coerce_bool, _normalize_base_url, _optional_str
from .models import SiteConfig, SiteConfigError, ThemeConfig

KNOWN_KEYS = frozenset(
    {
        "title",
        "description",
        "base_url",
        "input_dir",
        "output_dir",
        "templates_dir",
        "default_layout",
        "index_permalink",
        "include_drafts",
        "pygments_style",
        "theme",
    }
)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the site and its directories.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``site.yaml``). Relative directories inside the file are resolved
        against the file's parent directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for every missing key.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the YAML cannot be parsed, the top level is not a mapping, an
        unknown key is present, or a value has the wrong type.

    Examples
    --------
    >>> from pathlib import Path
    >>> from totw_pages.config import load_site_config
    >>> config = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> config.output_dir  # doctest: +SKIP
    PosixPath('_site')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle)
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise SiteConfigError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    return build_site_config(dict(loaded), base_dir=path.parent)


def build_site_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> SiteConfig:
    """Build a SiteConfig from an already-parsed mapping."""
    unknown = sorted(set(raw) - KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise SiteConfigError(msg)

    defaults = SiteConfig()
    include_drafts = defaults.include_drafts
    if "include_drafts" in raw:
        coerced = _coerce_bool(raw["include_drafts"])
        if coerced is None:
            msg = "'include_drafts' must be a boolean."
            raise SiteConfigError(msg)
        include_drafts = coerced

    index_permalink = raw.get("index_permalink", defaults.index_permalink)
    if index_permalink is None:
        index_permalink = ""
    index_permalink = str(index_permalink).strip()
    if index_permalink and not index_permalink.startswith("/"):
        msg = "'index_permalink' must start with '/'."
        raise SiteConfigError(msg)

    templates_dir = _optional_str(raw.get("templates_dir"))
    return SiteConfig(
        title=_optional_str(raw.get("title")) or defaults.title,
        description=_optional_str(raw.get("description")) or "",
        base_url=_normalize_base_url(raw.get("base_url")),
        input_dir=_resolve_dir(raw.get("input_dir"), defaults.input_dir, base_dir),
        output_dir=_resolve_dir(raw.get("output_dir"), defaults.output_dir, base_dir),
        templates_dir=(
            _resolve_dir(templates_dir, Path(templates_dir), base_dir)
            if templates_dir
            else None
        ),
        default_layout=_optional_str(raw.get("default_layout"))
        or defaults.default_layout,
        index_permalink=index_permalink,
        include_drafts=include_drafts,
        pygments_style=_optional_str(raw.get("pygments_style"))
        or defaults.pygments_style,
        theme=_build_theme_config(raw.get("theme")),
    )


def _resolve_dir(value: object | None, default: Path, base_dir: Path | None) -> Path:
    """Return ``value`` as a Path, anchored at ``base_dir`` when relative."""
    text = _optional_str(value)
    path = Path(text) if text else default
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def _build_theme_config(payload: object | None) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    if payload is None:
        return ThemeConfig()
    if not isinstance(payload, dict):
        msg = "'theme' must be a mapping."
        raise SiteConfigError(msg)
    base = ThemeConfig()
    return ThemeConfig(
        site_name=_optional_str(payload.get("site_name")) or base.site_name,
        tagline=_optional_str(payload.get("tagline")) or base.tagline,
        footer_note=_optional_str(payload.get("footer_note")) or base.footer_note,
    )


__all__ = ["build_site_config", "load_site_config"]
