from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

from ..config import CacheGeometry
from ..errors import ResourceError
from ..trace.parser import MAX_ADDRESS
from ..trace.record import Operation
from .address import AddressDecoder
from .stats import Statistics

# Largest set array the simulator will try to allocate.
MAX_SETS = 1 << 24


class AccessOutcome(str, Enum):
    """Classification of a single access."""

    COLD_MISS = "cold miss"
    HIT = "hit"
    MISS = "miss"
    MISS_EVICTION = "miss eviction"

    def __str__(self) -> str:
        return self.value

    @property
    def is_miss(self) -> bool:
        return self is not AccessOutcome.HIT


@dataclass
class CacheLine:
    """A resident block: its tag and whether it has been written since loaded."""
    tag: int
    dirty: bool = False


class CacheSet:
    """
    Lines of one set, ordered from least (front) to most (back) recently used.

    Backed by an OrderedDict keyed by tag, so lookup, move-to-MRU and
    LRU eviction are all O(1) and tags are unique by construction.
    """
    def __init__(self, associativity: int):
        self.associativity = associativity
        self.lines: OrderedDict[int, CacheLine] = OrderedDict()

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[CacheLine]:
        return iter(self.lines.values())

    def __contains__(self, tag: int) -> bool:
        return tag in self.lines

    @property
    def is_full(self) -> bool:
        return len(self.lines) >= self.associativity

    def tags(self) -> List[int]:
        """Resident tags in LRU -> MRU order."""
        return list(self.lines)

    def find_line(self, tag: int) -> CacheLine | None:
        """Finds a line with a given tag. If found, moves it to the end (MRU)."""
        line = self.lines.get(tag)
        if line is not None:
            self.lines.move_to_end(tag)
        return line

    def insert(self, line: CacheLine):
        """Appends a new line at the MRU end. The set must have room."""
        if self.is_full:
            raise ValueError("Cannot insert into a full cache set; evict first.")
        if line.tag in self.lines:
            raise ValueError(f"Tag {line.tag:#x} is already resident in this set.")
        self.lines[line.tag] = line

    def evict_lru(self) -> CacheLine:
        """Removes and returns the least recently used line."""
        _, line = self.lines.popitem(last=False)
        return line


class Cache:
    """
    Set-associative cache with strict LRU replacement and write-back dirty tracking.

    Only tag presence and dirty state are modelled. Each instance owns its
    sets and statistics, so independent caches can coexist.
    """
    def __init__(self, geometry: CacheGeometry):
        self.geometry = geometry
        self.block_bytes = geometry.block_bytes
        self.decoder = AddressDecoder(geometry)
        self.stats = Statistics()

        if geometry.set_count > MAX_SETS:
            raise ResourceError(
                f"Cannot allocate {geometry.set_count} sets (s={geometry.index_bits}); "
                f"the limit is {MAX_SETS}."
            )
        try:
            self.sets = [CacheSet(geometry.associativity) for _ in range(geometry.set_count)]
        except MemoryError as e:
            raise ResourceError(f"Out of memory allocating {geometry.set_count} cache sets.") from e

    def access(self, operation: Operation, address: int) -> AccessOutcome:
        """Applies one load or store to the cache and returns its classification."""
        if not 0 <= address <= MAX_ADDRESS:
            raise ValueError(f"Address {address} is outside the 64-bit address space.")
        is_store = operation == Operation.STORE

        tag, set_index = self.decoder.decode(address)
        cache_set = self.sets[set_index]

        line = cache_set.find_line(tag)
        if line is not None:
            self.stats.hits += 1
            if is_store and not line.dirty:
                line.dirty = True
                self.stats.dirty_bytes += self.block_bytes
            return AccessOutcome.HIT

        self.stats.misses += 1
        if len(cache_set) == 0:
            outcome = AccessOutcome.COLD_MISS
        elif not cache_set.is_full:
            outcome = AccessOutcome.MISS
        else:
            outcome = AccessOutcome.MISS_EVICTION
            self.stats.evictions += 1
            victim = cache_set.evict_lru()
            if victim.dirty:
                self.stats.dirty_bytes -= self.block_bytes
                self.stats.dirty_evictions += self.block_bytes

        cache_set.insert(CacheLine(tag=tag, dirty=is_store))
        if is_store:
            self.stats.dirty_bytes += self.block_bytes
        return outcome

    def snapshot(self) -> Statistics:
        """Read-only copy of the statistics accumulated so far."""
        return self.stats.snapshot()

    def resident_lines(self) -> int:
        return sum(len(s) for s in self.sets)
