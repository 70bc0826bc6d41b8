"""Common literal values used across totw_pages.

These constants keep header keys, file suffixes, and default names
centralized so the loader, assembler, and tests import the same values
without drifting. Intended for internal use within the totw_pages package.

Examples
--------
>>> from totw_pages import _constants
>>> "permalink" in _constants.RECOGNIZED_KEYS
True
>>> _constants.FRONT_MATTER_DELIMITER
'---'
"""

FRONT_MATTER_DELIMITER = "---"
RECOGNIZED_KEYS = frozenset(
    {"title", "layout", "permalink", "published", "order", "type"}
)
REQUIRED_KEYS = ("title", "permalink")
SOURCE_SUFFIXES = frozenset({".md", ".markdown", ".html"})
TEMPLATE_SUFFIXES = (".jinja", ".html")
DEFAULT_LAYOUT = "default"
INDEX_LAYOUT = "index"
STYLESHEET_PATH = "assets/pygments.css"
