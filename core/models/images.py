# =============================================================================
# core/models/images.py - Ordered Image List
# =============================================================================
# A product's images are an ordered collection: the first entry is the
# "main" image shown in listings. Each entry gets a stable id when it is
# added, so removing or moving an entry never depends on comparing image
# values (two staged images can be byte-identical).
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator
from uuid import uuid4


class ImageListFullError(ValueError):
    """Raised when adding entries would exceed the list's capacity."""

    def __init__(self, capacity: int, requested: int):
        super().__init__(f"Maximum {capacity} images allowed per product (requested {requested}).")
        self.capacity = capacity
        self.requested = requested


@dataclass(frozen=True)
class ImageEntry:
    """One image in an OrderedImageList: a URL or data URL plus its stable id."""
    source: str
    id: str = field(default_factory=lambda: uuid4().hex)


class OrderedImageList:
    """
    Ordered, capacity-bounded list of images with stable entry ids.

    Example:
        images = OrderedImageList(["https://cdn/a.jpg"], capacity=5)
        entry = images.append("https://cdn/b.jpg")
        images.move(entry.id, 0)
        images.sources  # ["https://cdn/b.jpg", "https://cdn/a.jpg"]
    """

    def __init__(self, sources: Iterable[str] = (), capacity: int | None = None):
        self.capacity = capacity
        self._entries: list[ImageEntry] = []
        self.extend(sources)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ImageEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> ImageEntry:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"OrderedImageList({self.sources!r}, capacity={self.capacity!r})"

    @property
    def entries(self) -> list[ImageEntry]:
        return list(self._entries)

    @property
    def sources(self) -> list[str]:
        """Image values in display order."""
        return [entry.source for entry in self._entries]

    @property
    def main(self) -> ImageEntry | None:
        """The first image, used as the product's main image."""
        return self._entries[0] if self._entries else None

    def index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        raise KeyError(entry_id)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def _ensure_room(self, count: int) -> None:
        if self.capacity is not None and len(self._entries) + count > self.capacity:
            raise ImageListFullError(self.capacity, len(self._entries) + count)

    def append(self, source: str) -> ImageEntry:
        self._ensure_room(1)
        entry = ImageEntry(source=source)
        self._entries.append(entry)
        return entry

    def extend(self, sources: Iterable[str]) -> list[ImageEntry]:
        """Append several images at once; nothing is added if they don't all fit."""
        sources = list(sources)
        self._ensure_room(len(sources))
        new_entries = [ImageEntry(source=source) for source in sources]
        self._entries.extend(new_entries)
        return new_entries

    def insert(self, index: int, source: str) -> ImageEntry:
        self._ensure_room(1)
        entry = ImageEntry(source=source)
        self._entries.insert(index, entry)
        return entry

    def remove(self, entry_id: str) -> ImageEntry:
        """Remove the entry with this id. Raises KeyError if it isn't present."""
        return self._entries.pop(self.index_of(entry_id))

    def remove_at(self, index: int) -> ImageEntry:
        return self._entries.pop(index)

    def move(self, entry_id: str, new_index: int) -> None:
        """Move an entry to new_index (clamped to the list bounds)."""
        entry = self.remove(entry_id)
        new_index = max(0, min(new_index, len(self._entries)))
        self._entries.insert(new_index, entry)

    def reorder(self, entry_ids: list[str]) -> None:
        """
        Put entries in the order given by entry_ids.

        Raises:
            ValueError: If entry_ids isn't a permutation of the current ids
        """
        current = {entry.id: entry for entry in self._entries}
        if len(entry_ids) != len(current) or set(entry_ids) != set(current):
            raise ValueError("reorder() needs every current entry id exactly once")
        self._entries = [current[entry_id] for entry_id in entry_ids]

    def clear(self) -> None:
        self._entries.clear()
