"""Rewrite markdown links between content files to their permalinks."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import urlsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any


class PermalinkLinkExtension(Extension):
    """Rewrite links that name another content file to that file's permalink.

    Authors cross-reference tips by their source filename (``tip-5.md`` or
    ``../archive/05.md#caveats``) so links keep working when browsing the
    repository. Insert this extension into a ``markdown.Markdown`` instance to
    turn those links into the permalinks the generated site actually serves.
    """

    def __init__(
        self,
        targets: typ.Mapping[str, str],
        *,
        base_dir: str = "",
        base_url: str = "",
    ) -> None:
        super().__init__()
        self.targets = targets
        self.base_dir = base_dir
        self.base_url = base_url

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the permalink treeprocessor on the Markdown instance."""
        processor = PermalinkTreeprocessor(
            md, self.targets, base_dir=self.base_dir, base_url=self.base_url
        )
        md.treeprocessors.register(processor, "totw_permalinks", 15)


class PermalinkTreeprocessor(Treeprocessor):
    """Point anchors at permalinks when their href names a known source file."""

    def __init__(
        self,
        md: Markdown,
        targets: typ.Mapping[str, str],
        *,
        base_dir: str,
        base_url: str,
    ) -> None:
        super().__init__(md)
        self.targets = targets
        self.base_dir = base_dir
        self.base_url = base_url.rstrip("/")

    def run(self, root: Element) -> Element:
        """Rewrite matching anchors in the parsed markdown tree."""
        for element in root.iter("a"):
            rewritten = self._rewrite(element.get("href"))
            if rewritten:
                element.set("href", rewritten)
        return root

    def _rewrite(self, target: str | None) -> str | None:
        """Return the permalink URL for ``target`` or None to leave it alone."""
        if not target or target.startswith(("#", "/")) or "://" in target:
            return None
        parsed = urlsplit(target)
        if parsed.scheme or parsed.netloc or not parsed.path:
            return None

        joined = posixpath.normpath(posixpath.join(self.base_dir, parsed.path))
        permalink = self.targets.get(joined)
        if permalink is None:
            return None

        url = f"{self.base_url}{permalink}"
        if parsed.query:
            url = f"{url}?{parsed.query}"
        if parsed.fragment:
            url = f"{url}#{parsed.fragment}"
        return url


__all__ = ["PermalinkLinkExtension", "PermalinkTreeprocessor"]
