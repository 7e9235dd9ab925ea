from __future__ import annotations
from dataclasses import dataclass, asdict, replace
from typing import Dict


@dataclass
class Statistics:
    """
    Counters accumulated over a replay.

    `dirty_bytes` is the number of bytes currently resident and dirty;
    `dirty_evictions` is the cumulative number of dirty bytes evicted.
    """
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    dirty_bytes: int = 0
    dirty_evictions: int = 0

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.accesses if self.accesses else 0.0

    def snapshot(self) -> Statistics:
        """Returns an independent copy of the current counters."""
        return replace(self)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def summary_line(self) -> str:
        return (f"hits:{self.hits} misses:{self.misses} evictions:{self.evictions} "
                f"dirty_bytes_in_cache:{self.dirty_bytes} "
                f"dirty_bytes_evicted:{self.dirty_evictions}")
