import pytest
from pathlib import Path
from csim.config import CacheGeometry


@pytest.fixture
def write_trace(tmp_path: Path):
    """Returns a helper that writes trace lines to a file and returns its path."""
    def _write(lines, name="test.trace"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return path
    return _write


@pytest.fixture
def small_geometry():
    """4 sets, 2 lines per set, 16-byte blocks."""
    return CacheGeometry(index_bits=2, offset_bits=4, associativity=2)
