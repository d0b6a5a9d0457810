"""Key position lookup"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional


@dataclass(frozen=True)
class KeyPos:
    """Grid coordinates for a named key"""
    x: int
    y: int


class KeyMap:
    """
    Read-only mapping of key name → KeyPos

    Owned by the device layer; animation instances only look keys up.
    """

    def __init__(self, positions: Optional[Dict[str, KeyPos]] = None):
        self._positions: Dict[str, KeyPos] = dict(positions or {})

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[str]], pitch: int = 1) -> "KeyMap":
        """
        Build a simple grid layout from rows of key names.

        Example:
            KeyMap.from_rows([["esc", "f1"], ["grave", "1"]], pitch=12)
        """
        positions = {}
        for y, row in enumerate(rows):
            for x, name in enumerate(row):
                positions[name] = KeyPos(x * pitch, y * pitch)
        return cls(positions)

    def key(self, name: str) -> Optional[KeyPos]:
        return self._positions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)
