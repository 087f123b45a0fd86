"""
Label Table
===========

The label table built by the resolver and consumed by a later encoder to
turn label references into addresses.

Two kinds of label live in one namespace:

- PROGRAM labels mark an instruction slot in a @prog section. Their offset
  counts bytes from the start of program code.
- DATA labels own a NUL-terminated byte buffer from a @data section. Their
  offset counts bytes from the start of the data area.

A name can be defined only once across both kinds.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional


class LabelKind(Enum):
    """What a label points at."""
    PROGRAM = auto()
    DATA = auto()


@dataclass(frozen=True)
class Label:
    """
    Label table entry.

    Attributes:
        name: Label name without the leading '.'
        line: Source line of the definition
        offset: Byte offset within the label's area
        kind: PROGRAM or DATA
        data: Byte content including the NUL terminator (DATA only)
    """
    name: str
    line: int
    offset: int
    kind: LabelKind
    data: bytes = b""


class LabelTable:
    """
    Mapping of label name to Label.

    Entries are only ever added; a conflicting definition leaves the
    original in place.
    """

    def __init__(self) -> None:
        self._labels: dict[str, Label] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels.values())

    def define(self, label: Label) -> Optional[Label]:
        """
        Add a label unless the name is taken.

        Returns:
            None if the label was added, otherwise the existing label
        """
        existing = self._labels.get(label.name)
        if existing is not None:
            return existing
        self._labels[label.name] = label
        return None

    def lookup(self, name: str) -> Optional[Label]:
        """Return the label called name, or None."""
        return self._labels.get(name)

    def program_labels(self) -> list[Label]:
        """PROGRAM labels ordered by offset."""
        return sorted(
            (lbl for lbl in self._labels.values() if lbl.kind == LabelKind.PROGRAM),
            key=lambda lbl: lbl.offset,
        )

    def data_labels(self) -> list[Label]:
        """DATA labels ordered by offset."""
        return sorted(
            (lbl for lbl in self._labels.values() if lbl.kind == LabelKind.DATA),
            key=lambda lbl: lbl.offset,
        )

    def data_size(self) -> int:
        """Total bytes occupied by DATA labels."""
        return sum(len(lbl.data) for lbl in self._labels.values())

    def format_symbols(self) -> str:
        """
        Render the table as a symbol file.

        Format: kind name offset [size] (one per line, sorted by name)

            # Symbol table
            # Generated by asm16
            DATA helloworld $0000 14
            PROG loop $0004
        """
        lines = ["# Symbol table", "# Generated by asm16"]
        for name, label in sorted(self._labels.items()):
            if label.kind == LabelKind.DATA:
                lines.append(f"DATA {name} ${label.offset:04X} {len(label.data)}")
            else:
                lines.append(f"PROG {name} ${label.offset:04X}")
        return "\n".join(lines) + "\n"
