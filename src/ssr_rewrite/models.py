import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Change:
    """Replace bytes [start_byte, end_byte) of the original content"""

    start_byte: int
    end_byte: int
    replacement: str


@dataclass
class EditSet:
    """Changes gathered across all matches of one edit run.

    Owned by the thread that created it; recording from any other thread is
    rejected. Insertion order carries no meaning.
    """

    changes: list[Change] = field(default_factory=list)
    _owner: int = field(default_factory=threading.get_ident, repr=False)

    def record(self, change: Change) -> None:
        if threading.get_ident() != self._owner:
            raise RuntimeError("edit set used outside of its owning thread")
        self.changes.append(change)

    def drain(self) -> list[Change]:
        """Hand over all recorded changes and leave the set empty"""
        drained, self.changes = self.changes, []
        return drained

    def __len__(self) -> int:
        return len(self.changes)


def is_char_boundary(source: bytes, offset: int) -> bool:
    """Whether `offset` falls between two UTF-8 characters of `source`"""
    return offset == len(source) or source[offset] & 0xC0 != 0x80
