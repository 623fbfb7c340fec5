"""A counter whose printed values sort lexicographically in counting order."""

from __future__ import annotations

from dataclasses import dataclass

_MAX_PREFIX = 9


@dataclass
class LexCtr:
    """Counts 000…099, 10000…19999, 2000000…2999999, … up to 9 followed by 20 nines.

    Smaller numbers print shorter, and the printed strings sort in the same
    order as the count. It holds 10**20 distinct values in total.
    """

    prefix: int = 0
    count: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.prefix <= _MAX_PREFIX:
            raise ValueError(f"prefix {self.prefix} out of range")
        if not 0 <= self.count < self._limit:
            raise ValueError(f"count {self.count} out of range")

    @property
    def _limit(self) -> int:
        return 100 ** (self.prefix + 1)

    def inc(self) -> None:
        """Advances the counter by one; overflowing 10**20 values raises OverflowError."""
        count = self.count + 1
        if count < self._limit:
            self.count = count
            return
        if self.prefix >= _MAX_PREFIX:
            raise OverflowError("lexicographic counter exhausted")
        self.prefix += 1
        self.count = 0

    def __str__(self) -> str:
        width = self.prefix * 2 + 2
        return f"{self.prefix}{self.count:0{width}d}"