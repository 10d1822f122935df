"""Positional cursor over executed query results."""

from typing import Any, Iterator, List, Sequence

__all__ = ("ScrollCursor",)


class ScrollCursor:
    """Scrollable view over a result sequence.

    The cursor starts before the first row. Movement methods return True
    when the cursor lands on a row.

    Example:
        >>> with query.scroll() as rows:
        ...     while rows.next():
        ...         handle(rows.get())
    """

    def __init__(self, results: Sequence[Any]) -> None:
        self._results: List[Any] = list(results)
        self._position = -1
        self._closed = False

    @property
    def position(self) -> int:
        """Zero-based row index, -1 before the first row, ``len`` after the last."""
        return self._position

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._results)

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Cursor is closed")

    def _move_to(self, position: int) -> bool:
        self._check_open()
        self._position = max(-1, min(position, len(self._results)))
        return 0 <= self._position < len(self._results)

    def next(self) -> bool:
        return self._move_to(self._position + 1)

    def previous(self) -> bool:
        return self._move_to(self._position - 1)

    def first(self) -> bool:
        return self._move_to(0)

    def last(self) -> bool:
        return self._move_to(len(self._results) - 1)

    def scroll(self, rows: int) -> bool:
        """Move `rows` positions forward (negative moves backward)."""
        return self._move_to(self._position + rows)

    def get(self) -> Any:
        """Return the row under the cursor."""
        self._check_open()
        if not 0 <= self._position < len(self._results):
            raise IndexError(f"Cursor is not positioned on a row (position={self._position})")
        return self._results[self._position]

    def close(self) -> None:
        self._closed = True
        self._results = []

    def __iter__(self) -> Iterator[Any]:
        while self.next():
            yield self.get()

    def __enter__(self) -> "ScrollCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
