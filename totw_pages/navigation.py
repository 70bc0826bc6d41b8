"""Ordered navigation across published documents."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from .documents import Document


@dc.dataclass(frozen=True, slots=True)
class NavEntry:
    """One navigation link.

    Attributes
    ----------
    title : str
        Link label, taken from the document title.
    permalink : str
        Document permalink.
    url : str
        Permalink prefixed with the site ``base_url``.
    order : int | float | None
        Sort key copied from the document.
    kind : str | None
        Document ``type`` header value, for templates that group entries.
    """

    title: str
    permalink: str
    url: str
    order: int | float | None = None
    kind: str | None = None


@dc.dataclass(frozen=True, slots=True)
class NavigationIndex(cabc.Sequence[NavEntry]):
    """Immutable, ordered sequence of navigation entries."""

    entries: tuple[NavEntry, ...] = ()

    def __getitem__(self, index: typ.Any) -> typ.Any:
        return self.entries[index]

    def __len__(self) -> int:
        return len(self.entries)

    def position(self, permalink: str) -> int | None:
        """Return the index of ``permalink`` or None when it is not listed."""
        for idx, entry in enumerate(self.entries):
            if entry.permalink == permalink:
                return idx
        return None

    def previous(self, permalink: str) -> NavEntry | None:
        """Return the entry listed before ``permalink``, if any."""
        idx = self.position(permalink)
        if idx is None or idx == 0:
            return None
        return self.entries[idx - 1]

    def next(self, permalink: str) -> NavEntry | None:
        """Return the entry listed after ``permalink``, if any."""
        idx = self.position(permalink)
        if idx is None or idx + 1 >= len(self.entries):
            return None
        return self.entries[idx + 1]


def build_navigation(
    documents: cabc.Iterable[Document], *, base_url: str = ""
) -> NavigationIndex:
    """Return the navigation index for the published ``documents``.

    Entries are sorted by ``order`` ascending. Documents without an order sort
    after every ordered one, and ties keep their encounter order because
    ``sorted`` is stable.
    """
    published = [doc for doc in documents if doc.published]
    ordered = sorted(
        published,
        key=lambda doc: (doc.order is None, doc.order if doc.order is not None else 0),
    )
    prefix = base_url.rstrip("/")
    return NavigationIndex(
        tuple(
            NavEntry(
                title=doc.title,
                permalink=doc.permalink,
                url=f"{prefix}{doc.permalink}",
                order=doc.order,
                kind=doc.kind,
            )
            for doc in ordered
        )
    )


__all__ = ["NavEntry", "NavigationIndex", "build_navigation"]
