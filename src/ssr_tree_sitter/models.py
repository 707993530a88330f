from dataclasses import dataclass, field
from typing import NamedTuple


class Point(NamedTuple):
    """0-indexed (row, column) position; columns count bytes"""

    row: int
    column: int


@dataclass(frozen=True)
class Range:
    """Byte offsets plus row/column positions of a source region"""

    start_byte: int
    end_byte: int
    start_point: Point
    end_point: Point

    @classmethod
    def from_node(cls, node) -> "Range":
        return cls(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_point=Point(*node.start_point),
            end_point=Point(*node.end_point),
        )


@dataclass(frozen=True)
class Capture:
    """Named binding from a successful pattern match"""

    index: int
    name: str
    range: Range
    text: str


@dataclass(frozen=True)
class Match:
    """One successful pattern application, bundling its captures"""

    id: int
    pattern_index: int
    captures: tuple[Capture, ...] = field(default_factory=tuple)

    def capture(self, name: str) -> Capture | None:
        """First capture bound to `name`, if any"""
        for cap in self.captures:
            if cap.name == name:
                return cap
        return None


@dataclass(frozen=True)
class SyntaxNode:
    """A named syntax tree node as seen by the tree printer"""

    kind: str
    start_point: Point
    end_point: Point
    start_byte: int
    end_byte: int
    depth: int  # number of named ancestors
    field_name: str | None = None
    parent: int | None = None  # index of the parent in the flattened walk
    is_named: bool = True
