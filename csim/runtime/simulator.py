from __future__ import annotations
from typing import Dict, Any, Iterable, List, Tuple

from ..config import CacheGeometry
from ..trace.record import AccessRecord
from ..utils.logging import get_logger
from .cache import Cache
from .stats import Statistics

log = get_logger(__name__)


def run(records: Iterable[AccessRecord], geometry: CacheGeometry, verbose: bool = False,
        keep_timeline: bool = False) -> Tuple[List[Dict[str, Any]], Statistics]:
    """
    Replays a trace against a fresh cache.

    Records are processed strictly in order. Returns the per-access timeline
    (only populated when `keep_timeline` is set) and the final
    statistics snapshot.
    """
    cache = Cache(geometry)
    timeline: List[Dict[str, Any]] = []

    for index, record in enumerate(records):
        outcome = cache.access(record.operation, record.address)
        if verbose:
            log.info(f"{record} {outcome}")
        if keep_timeline:
            tag, set_index = cache.decoder.decode(record.address)
            timeline.append({
                'index': index,
                'op': record.operation.value,
                'address': record.address,
                'size': record.size,
                'set': set_index,
                'tag': tag,
                'block_address': cache.decoder.reconstruct_address(tag, set_index),
                'outcome': outcome.value,
            })

    return timeline, cache.snapshot()
