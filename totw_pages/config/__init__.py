"""Load and validate site configuration YAML for totw builds.

This subpackage parses the optional ``site.yaml`` file, applies defaults,
resolves directories relative to the file, and produces the frozen
:class:`SiteConfig` dataclass that the loader, renderer, and assembler
consume. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from totw_pages.config import load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> site.default_layout  # doctest: +SKIP
'default'
"""

from .loader import build_site_config, load_site_config
from .models import SiteConfig, SiteConfigError, ThemeConfig

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "build_site_config",
    "load_site_config",
]
