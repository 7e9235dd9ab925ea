from __future__ import annotations
import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Dict, Any
from ..config import SimConfig, CacheGeometry
from ..runtime.stats import Statistics
from . import viz


def _count_outcomes_per_set(timeline: List[Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    """Counts outcomes per set index. Keys are strings so the result is JSON-ready."""
    per_set: Dict[str, Dict[str, int]] = {}
    for item in timeline:
        counts = per_set.setdefault(str(item['set']), {})
        counts[item['outcome']] = counts.get(item['outcome'], 0) + 1
    return per_set


def generate_report_json(timeline: List[Dict[str, Any]], geometry: CacheGeometry,
                         stats: Statistics, config: SimConfig) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary for a finished replay."""
    report_data = {
        "geometry": {
            **asdict(geometry),
            "set_count": geometry.set_count,
            "block_bytes": geometry.block_bytes,
        },
        "stats": stats.to_dict(),
        "accesses": stats.accesses,
        "hit_rate": stats.hit_rate,
        "per_set": _count_outcomes_per_set(timeline),
        "timeline": timeline,
        "config": config.__dict__,
    }
    return report_data


def generate_report(timeline: List[Dict[str, Any]], geometry: CacheGeometry,
                    stats: Statistics, config: SimConfig):
    """Prints the summary line and, if a report directory is configured, writes all artifacts."""
    if config.report_dir:
        report_data = generate_report_json(timeline, geometry, stats, config)
        output_dir = Path(config.report_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        with open(output_dir / "report.json", "w") as f:
            json.dump(report_data, f, indent=4)

        viz.export_outcome_chart(timeline, str(output_dir / "report.html"))

        print(viz.export_outcome_ascii(timeline))
        print(f"Reports generated in {output_dir.absolute()}")
        print(f"Hit Rate: {stats.hit_rate:.2%}")

    print(stats.summary_line())
