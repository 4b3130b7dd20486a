# file: src/aztec_decoder/padding.py

"""
Removal of encoder bit stuffing.

An Aztec encoder never emits a codeword whose bits are all zero or all one.
When the next word-1 bits are all equal it writes them followed by one
complementary stuffing bit, giving the word value 1 or 2^w - 2.
"""

from .bits import PackedBits


def strip_padding(bits: PackedBits, word_bit_count: int) -> PackedBits:
    """
    Remove stuffing bits from a stream of whole codewords.
    
    Args:
        bits: Corrected data bits, a whole number of words
        word_bit_count: Codeword width in bits
    
    Returns:
        Destuffed bit stream, no longer aligned to word_bit_count
    
    Raises:
        ValueError: If bits.size is not a multiple of word_bit_count
    """
    if word_bit_count < 2:
        raise ValueError(f"word_bit_count must be >= 2, got {word_bit_count}")
    if bits.size % word_bit_count != 0:
        raise ValueError(
            f"Bit count {bits.size} is not a multiple of word size {word_bit_count}"
        )
    
    num_words = bits.size // word_bit_count
    ones_minus_one = (1 << word_bit_count) - 2
    
    output = PackedBits()
    for i in range(num_words):
        value = bits.read(i * word_bit_count, word_bit_count)
        if value == 1 or value == ones_minus_one:
            output.append(value >> 1, word_bit_count - 1)
        else:
            output.append(value, word_bit_count)
    
    return output
