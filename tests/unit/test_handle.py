"""Unit tests for the tagged vector handle."""

import pytest

from vecbuf.memory.handle import (
    MAX_INLINE_ELEMENT_SIZE,
    AllocatedBlock,
    InlineHandle,
    fits_inline,
    is_inline_bits,
)

pytestmark = pytest.mark.unit


class TestInlineHandle:
    """Tests for the allocation-free empty form."""

    def test_reports_zero_length_and_capacity(self):
        handle = InlineHandle(4)
        assert handle.length == 0
        assert handle.capacity == 0
        assert handle.element_size == 4

    def test_bits_set_the_tag_and_shift_the_size(self):
        assert InlineHandle(4).bits == 0b1001
        assert InlineHandle(0).bits == 1

    @pytest.mark.parametrize("size", [0, 1, 4, 24, 4096, MAX_INLINE_ELEMENT_SIZE])
    def test_bits_preserve_element_size(self, size):
        handle = InlineHandle(size)
        assert InlineHandle.from_bits(handle.bits) == handle

    def test_largest_size_still_fits_in_a_word(self):
        assert InlineHandle(MAX_INLINE_ELEMENT_SIZE).bits < 2**64

    def test_from_bits_rejects_untagged_values(self):
        with pytest.raises(ValueError):
            InlineHandle.from_bits(0x1000)

    def test_from_bits_rejects_values_wider_than_a_word(self):
        with pytest.raises(ValueError):
            InlineHandle.from_bits((1 << 64) | 1)


class TestFitsInline:
    """Tests for the inline/allocated decision made by new."""

    def test_zero_capacity_small_size_is_inline(self):
        assert fits_inline(0, 4)

    def test_nonzero_capacity_is_allocated(self):
        assert not fits_inline(1, 4)

    def test_oversized_element_is_allocated(self):
        assert not fits_inline(0, MAX_INLINE_ELEMENT_SIZE + 1)

    def test_is_inline_bits(self):
        assert is_inline_bits(InlineHandle(8).bits)
        assert not is_inline_bits(8)


class TestAllocatedBlock:
    """Tests for the allocated form's header arithmetic."""

    def test_offsets_and_used_bytes(self):
        block = AllocatedBlock(capacity=4, element_size=8, length=3, storage=bytearray(32))
        assert block.offset(2) == 16
        assert block.used_bytes == 24
