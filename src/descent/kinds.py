"""Named integer token/node kinds."""

from __future__ import annotations

from enum import IntEnum


class KindEnum(IntEnum):
    """Base for grammar kind enumerations; members display as ``Name(n)``."""

    def __str__(self) -> str:
        return f"{self.name}({self.value})"

    @property
    def kind(self) -> int:
        return int(self)


def make_kinds(name: str, *labels: str) -> type[KindEnum]:
    """Build a KindEnum whose members are numbered from 0 in order."""
    return KindEnum(name, [(label, i) for i, label in enumerate(labels)])  # type: ignore[return-value]
