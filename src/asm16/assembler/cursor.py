"""
Lookahead Cursor
================

A random-access reader over an already materialized sequence. The lexer
walks the source characters with one, the resolver walks the token list
with another.

Example
-------
>>> cursor = Cursor("ab;c")
>>> cursor.peek(), cursor.peek(1), cursor.peek(9)
('a', 'b', None)
>>> cursor.skip_until({";"})
2
>>> cursor.consume()
';'
"""

from typing import Any, Callable, Container, Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class Cursor(Generic[T]):
    """
    Peek/consume reader over a fixed sequence.

    Attributes:
        position: Index of the element consume() returns next
    """

    def __init__(self, elements: Sequence[T]):
        self._elements = elements
        self.position = 0

    def __len__(self) -> int:
        return len(self._elements)

    def at_end(self) -> bool:
        """Check if every element has been consumed."""
        return self.position >= len(self._elements)

    def peek(self, offset: int = 0) -> Optional[T]:
        """
        Look at the element at position + offset without advancing.

        Returns None when that index is out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self._elements):
            return None
        return self._elements[index]

    def consume(self) -> T:
        """
        Return the current element and advance by one.

        Callers peek first; consuming past the end is a programming error.

        Raises:
            IndexError: If the cursor is already at the end
        """
        if self.at_end():
            raise IndexError(f"cursor consumed past end (position {self.position})")
        element = self._elements[self.position]
        self.position += 1
        return element

    def seek(self, index: int) -> None:
        """Move to an absolute index (clamped to the sequence bounds)."""
        self.position = max(0, min(index, len(self._elements)))

    def reset(self) -> None:
        """Move back to the first element."""
        self.position = 0

    def skip_until(self, stop: Container[Any],
                   key: Optional[Callable[[T], Any]] = None) -> int:
        """
        Advance until the current element's key is in the stop-set.

        Stops in front of the matching element (it is not consumed) or at
        the end of the sequence.

        Args:
            stop: Keys that end the skip
            key: Maps an element to the value compared against stop
                 (default: the element itself)

        Returns:
            The number of elements skipped
        """
        skipped = 0
        while not self.at_end():
            element = self._elements[self.position]
            if (key(element) if key is not None else element) in stop:
                break
            self.position += 1
            skipped += 1
        return skipped
