"""Per-session record of page indices that were already refreshed."""

from collections.abc import Iterator


class VisitedPages:
    """Set of list positions refreshed this session.

    Positions, not ids, are tracked, so removals must shift the set.
    """

    def __init__(self) -> None:
        self._pages: set[int] = set()

    def mark(self, index: int) -> None:
        self._pages.add(index)

    def __contains__(self, index: object) -> bool:
        return index in self._pages

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._pages))

    def __len__(self) -> int:
        return len(self._pages)

    def shift_after_removal(self, removed: int) -> None:
        """Drop ``removed`` and move every later position up by one."""
        self._pages = {
            i - 1 if i > removed else i for i in self._pages if i != removed
        }

    def clear(self) -> None:
        self._pages.clear()
