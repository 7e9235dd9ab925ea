from __future__ import annotations
from ..config import CacheGeometry


class AddressDecoder:
    """Splits 64-bit addresses into (tag, set index) for a fixed geometry."""

    def __init__(self, geometry: CacheGeometry):
        self.offset_bits = geometry.offset_bits
        self.index_bits = geometry.index_bits
        self.tag_shift = geometry.index_bits + geometry.offset_bits
        self.index_mask = (1 << geometry.index_bits) - 1

    def decode(self, address: int) -> tuple[int, int]:
        """Returns (tag, set_index) for an address."""
        tag = address >> self.tag_shift
        set_index = (address >> self.offset_bits) & self.index_mask
        return tag, set_index

    def reconstruct_address(self, tag: int, set_index: int) -> int:
        """Reconstructs the block start address from tag and set index."""
        return (tag << self.tag_shift) | (set_index << self.offset_bits)


def decode_address(address: int, geometry: CacheGeometry) -> tuple[int, int]:
    """Stateless form of AddressDecoder.decode."""
    return AddressDecoder(geometry).decode(address)
