# file: tests/test_bits_and_padding.py

"""
Unit tests for the packed bit buffer and stuffing bit removal.

Test coverage:
    - MSB-first reads and appends
    - Byte packing and unpacking
    - Stuffed word removal for each word width
    - Padding idempotence on unstuffed streams
    - Contract violations
"""

import random

import pytest

from aztec_decoder import PackedBits, bit_to_byte_count, strip_padding, pack_words
from aztec_decoder.testing_utils import stuff_bits


class TestPackedBits:
    """Test PackedBits buffer."""
    
    def test_append_and_read_msb_first(self):
        """Values are written and read most significant bit first."""
        bits = PackedBits()
        bits.append(0b101, 3)
        bits.append(0b0011, 4)
        
        assert bits.size == 7
        assert bits.to_bit_string() == "1010011"
        assert bits.read(0, 3) == 0b101
        assert bits.read(3, 4) == 0b0011
        assert bits.read(1, 4) == 0b0100
    
    def test_wrap_reads_big_endian_bytes(self):
        """wrap() unpacks bytes with the first bit being the byte's MSB."""
        bits = PackedBits.wrap(b'\xa5\x0f', 12)
        
        assert bits.size == 12
        assert bits.to_bit_string() == "101001010000"
    
    def test_to_bytes_pads_last_byte_with_zeros(self):
        """Packing a partial byte pads on the right."""
        bits = PackedBits.from_bit_string("1111 1")
        assert bits.to_bytes() == b'\xf8'
    
    def test_to_bytes_empty(self):
        """Empty buffer packs to empty bytes."""
        assert PackedBits().to_bytes() == b''
    
    def test_wrap_too_short_raises(self):
        """Requesting more bits than the buffer holds is an error."""
        with pytest.raises(ValueError, match="requested"):
            PackedBits.wrap(b'\x00', 9)
    
    def test_read_out_of_range_raises(self):
        """Reading past the end is an error."""
        bits = PackedBits.from_bit_string("0101")
        with pytest.raises(IndexError):
            bits.read(2, 3)
    
    def test_from_bit_string_rejects_other_characters(self):
        """Only 0 and 1 are accepted."""
        with pytest.raises(ValueError, match="only contain"):
            PackedBits.from_bit_string("0102")
    
    def test_bit_to_byte_count(self):
        """Rounds up to whole bytes."""
        assert bit_to_byte_count(0) == 0
        assert bit_to_byte_count(1) == 1
        assert bit_to_byte_count(8) == 1
        assert bit_to_byte_count(60) == 8


class TestStripPadding:
    """Test stuffing bit removal."""
    
    def test_no_stuffed_words_is_identity(self):
        """A stream without stuffed words passes through unchanged."""
        bits = pack_words([5, 10, 40, 33], 6)
        
        stripped = strip_padding(bits, 6)
        
        assert stripped == bits
    
    def test_stuffed_words_lose_one_bit(self):
        """Word values 1 and 2^w-2 become (w-1)-bit words equal to value >> 1."""
        bits = pack_words([1, 62, 7], 6)
        
        stripped = strip_padding(bits, 6)
        
        assert stripped.to_bit_string() == "00000" + "11111" + "000111"
    
    @pytest.mark.parametrize("width", [6, 8, 10, 12])
    def test_stuffed_words_each_width(self, width):
        """Stuffing removal is the same rule for every codeword width."""
        ones_minus_one = (1 << width) - 2
        bits = pack_words([ones_minus_one, 2, 1], width)
        
        stripped = strip_padding(bits, width)
        
        expected = PackedBits()
        expected.append(ones_minus_one >> 1, width - 1)
        expected.append(2, width)
        expected.append(0, width - 1)
        assert stripped == expected
    
    def test_partial_word_raises(self):
        """Input must be a whole number of words."""
        bits = PackedBits.from_bit_string("0101010")
        with pytest.raises(ValueError, match="not a multiple"):
            strip_padding(bits, 6)
    
    def test_empty_input(self):
        """Zero words strip to an empty stream."""
        assert strip_padding(PackedBits(), 8).size == 0
    
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_undoes_encoder_stuffing(self, seed):
        """Stripping recovers the encoder's input followed only by padding ones."""
        rng = random.Random(seed)
        # Long zero/one runs force stuffing
        original = PackedBits()
        for _ in range(20):
            original.append(rng.choice([0, 0x3f, rng.randint(0, 63)]), 6)
        
        words = stuff_bits(original, 8)
        stripped = strip_padding(pack_words(words, 8), 8)
        
        assert stripped.bits[:original.size] == original.bits
        tail = stripped.bits[original.size:]
        assert len(tail) < 8
        assert all(bit == 1 for bit in tail)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
