"""Directory statistics value object."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DirStats:
    """Bytes and file count observed or removed during one pass.

    Only files count: directories contribute neither bytes nor a file
    of their own.  Subtraction clamps at zero so a re-measured remainder
    can never push a total negative.
    """

    total_size: int = 0
    file_count: int = 0

    def __add__(self, other: DirStats) -> DirStats:
        if not isinstance(other, DirStats):
            return NotImplemented
        return DirStats(
            total_size=self.total_size + other.total_size,
            file_count=self.file_count + other.file_count,
        )

    def __sub__(self, other: DirStats) -> DirStats:
        if not isinstance(other, DirStats):
            return NotImplemented
        return DirStats(
            total_size=max(0, self.total_size - other.total_size),
            file_count=max(0, self.file_count - other.file_count),
        )

    @classmethod
    def single_file(cls, size: int) -> DirStats:
        """Stats for exactly one file of *size* bytes."""
        return cls(total_size=size, file_count=1)
