# file: src/aztec_decoder/testing_utils.py

"""
Testing utilities for the Aztec decoder.

Provides a minimal text encoder, bit stuffing, marker construction and
error injection for validation and robustness testing. Used only in
test/evaluation contexts.
"""

import random
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .bits import PackedBits
from .decoder import pack_words, split_words
from .marker import AztecMarker, Structure
from .modes import Encoding, dispatch
from .rs_codec import ReedSolomonCodec

# (value, number of bits)
Symbol = Tuple[int, int]

_TEXT_ENCODINGS = (Encoding.UPPER, Encoding.LOWER, Encoding.MIXED, Encoding.PUNCT, Encoding.DIGIT)

# Latch sequences between the encodings encode_text() switches into
_LATCHES: Dict[Tuple[Encoding, Encoding], List[Symbol]] = {
    (Encoding.UPPER, Encoding.LOWER): [(28, 5)],
    (Encoding.UPPER, Encoding.MIXED): [(29, 5)],
    (Encoding.UPPER, Encoding.DIGIT): [(30, 5)],
    (Encoding.LOWER, Encoding.UPPER): [(30, 5), (14, 4)],
    (Encoding.LOWER, Encoding.MIXED): [(29, 5)],
    (Encoding.LOWER, Encoding.DIGIT): [(30, 5)],
    (Encoding.MIXED, Encoding.UPPER): [(29, 5)],
    (Encoding.MIXED, Encoding.LOWER): [(28, 5)],
    (Encoding.MIXED, Encoding.DIGIT): [(29, 5), (30, 5)],
    (Encoding.DIGIT, Encoding.UPPER): [(14, 4)],
    (Encoding.DIGIT, Encoding.LOWER): [(14, 4), (28, 5)],
    (Encoding.DIGIT, Encoding.MIXED): [(14, 4), (29, 5)],
}


def _build_char_tables() -> Dict[Encoding, Dict[str, int]]:
    """Invert the decoder tables: single character -> symbol value."""
    tables = {}
    for encoding in _TEXT_ENCODINGS:
        table = {}
        for value in range(1 << encoding.word_size):
            action = dispatch(encoding, value)
            if len(action.text) == 1 and action.text not in table:
                table[action.text] = value
        tables[encoding] = table
    return tables


CHAR_TABLES = _build_char_tables()


def encode_text(text: str) -> List[Symbol]:
    """
    Encode text into symbols using latches and single punctuation shifts.
    
    This is not an optimal encoder; it exists to produce valid input for
    the decoder. Binary shift is never used.
    
    Raises:
        ValueError: If a character has no text encoding
    """
    symbols: List[Symbol] = []
    mode = Encoding.UPPER
    
    for ch in text:
        if ch in CHAR_TABLES[mode]:
            symbols.append((CHAR_TABLES[mode][ch], mode.word_size))
        elif mode == Encoding.LOWER and ch in CHAR_TABLES[Encoding.UPPER]:
            symbols.append((28, 5))
            symbols.append((CHAR_TABLES[Encoding.UPPER][ch], 5))
        elif ch in CHAR_TABLES[Encoding.PUNCT]:
            symbols.append((0, mode.word_size))
            symbols.append((CHAR_TABLES[Encoding.PUNCT][ch], 5))
        else:
            for target in (Encoding.UPPER, Encoding.LOWER, Encoding.DIGIT, Encoding.MIXED):
                if target != mode and ch in CHAR_TABLES[target]:
                    break
            else:
                raise ValueError(f"Character {ch!r} cannot be encoded as text")
            symbols.extend(_LATCHES[(mode, target)])
            mode = target
            symbols.append((CHAR_TABLES[mode][ch], mode.word_size))
    
    return symbols


def symbols_to_bits(symbols: Sequence[Symbol]) -> PackedBits:
    bits = PackedBits()
    for value, length in symbols:
        bits.append(value, length)
    return bits


def stuff_bits(bits: PackedBits, word_bit_count: int) -> List[int]:
    """
    Split a bit stream into codewords, inserting stuffing bits.
    
    Whenever the next word-1 bits are all zeros or all ones a complementary
    bit is added and only word-1 bits are consumed. The last word is padded
    with ones.
    """
    mask = (1 << word_bit_count) - 2
    words = []
    
    i = 0
    while i < bits.size:
        word = 0
        for j in range(word_bit_count):
            if i + j >= bits.size or bits.bits[i + j]:
                word |= 1 << (word_bit_count - 1 - j)
        
        if (word & mask) == mask:
            words.append(word & mask)
            i += word_bit_count - 1
        elif (word & mask) == 0:
            words.append(word | 1)
            i += word_bit_count - 1
        else:
            words.append(word)
            i += word_bit_count
    
    return words


def build_marker(
    payload: Union[str, Sequence[Symbol]],
    data_layers: int,
    structure: Structure = Structure.FULL
) -> AztecMarker:
    """
    Create a marker whose raw_bits hold the encoded payload and its parity.
    
    Args:
        payload: Text, or a list of (value, bits) symbols
        data_layers: Number of data layers
        structure: Compact or full
    
    Returns:
        Marker ready for AztecDecoder.process()
    
    Example:
        >>> marker = build_marker("HELLO", data_layers=2)
        >>> AztecDecoder().process(marker)
        True
    """
    symbols = encode_text(payload) if isinstance(payload, str) else list(payload)
    marker = AztecMarker(data_layers=data_layers, structure=structure)
    word_bit_count = marker.word_bit_count
    
    data_words = stuff_bits(symbols_to_bits(symbols), word_bit_count)
    if len(data_words) >= marker.capacity_words:
        raise ValueError(
            f"Payload needs {len(data_words)} words, marker holds {marker.capacity_words}"
        )
    
    codec = ReedSolomonCodec(word_bit_count)
    codec.generator(marker.capacity_words - len(data_words))
    parity_words = codec.encode(data_words)
    
    bits = pack_words(data_words + parity_words, word_bit_count)
    # Unused bits at the end of the layers
    bits.append(0, marker.capacity_bits - bits.size)
    
    marker.message_word_count = len(data_words)
    marker.raw_bits = bits.to_bytes()
    return marker


def inject_word_errors(
    marker: AztecMarker,
    num_errors: int,
    seed: Optional[int] = None
) -> AztecMarker:
    """
    Return a copy of the marker with `num_errors` codewords corrupted.
    
    Output is random unless a seed is given; the same seed always
    corrupts the same words the same way. A private random.Random is
    used, so the global random state is left untouched. Intended for
    testing/evaluation only.
    
    Args:
        marker: Marker with raw_bits set
        num_errors: Number of distinct codewords to corrupt
        seed: Random seed for reproducibility (optional)
    """
    if not 0 <= num_errors <= marker.capacity_words:
        raise ValueError(
            f"num_errors must be in [0, {marker.capacity_words}], got {num_errors}"
        )
    
    rng = random.Random(seed)
    word_bit_count = marker.word_bit_count
    bits = PackedBits.wrap(marker.raw_bits, marker.capacity_bits)
    words = split_words(bits, word_bit_count, marker.capacity_words)
    
    for index in rng.sample(range(len(words)), num_errors):
        words[index] ^= rng.randint(1, (1 << word_bit_count) - 1)
    
    corrupted = pack_words(words, word_bit_count)
    corrupted.append(0, marker.capacity_bits - corrupted.size)
    return replace(marker, raw_bits=corrupted.to_bytes())
