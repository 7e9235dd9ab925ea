import pytest
from csim.config import CacheGeometry
from csim.runtime.address import AddressDecoder, decode_address


def test_decode_tag_and_index(small_geometry):
    """Verify that addresses are correctly decomposed into tag and set index."""
    # 4 sets -> 2 index bits, 16-byte blocks -> 4 offset bits
    # Address: 0b_TAG_INDEX_OFFSET
    address = 0b1011_10_0101
    tag, set_index = decode_address(address, small_geometry)
    assert tag == 0b1011
    assert set_index == 2


def test_decode_ignores_offset_bits(small_geometry):
    decoder = AddressDecoder(small_geometry)
    assert decoder.decode(0x120) == decoder.decode(0x12f)
    assert decoder.decode(0x120) != decoder.decode(0x130)


def test_decode_single_set():
    geometry = CacheGeometry(index_bits=0, offset_bits=3, associativity=4)
    decoder = AddressDecoder(geometry)

    for address in (0, 7, 8, 0xdeadbeef):
        tag, set_index = decoder.decode(address)
        assert set_index == 0
        assert tag == address >> 3


def test_decode_no_offset_no_index():
    geometry = CacheGeometry(index_bits=0, offset_bits=0, associativity=1)
    assert decode_address(12345, geometry) == (12345, 0)


def test_decode_top_of_address_space(small_geometry):
    tag, set_index = decode_address((1 << 64) - 1, small_geometry)
    assert tag == (1 << 58) - 1
    assert set_index == 3


def test_reconstruct_block_address(small_geometry):
    decoder = AddressDecoder(small_geometry)
    tag, set_index = decoder.decode(0x1234)
    assert decoder.reconstruct_address(tag, set_index) == 0x1230
