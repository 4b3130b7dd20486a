# file: src/aztec_decoder/marker.py

"""
Aztec marker descriptor.

Holds what the upstream detector extracted from the image (layer count,
structure, raw bits, data word count) and receives the decoder's outputs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Structure(Enum):
    """Symbol structure. Compact symbols have a smaller bullseye and at most 4 layers."""
    COMPACT = "compact"
    FULL = "full"


# Largest layer count for each structure
MAX_LAYERS = {
    Structure.COMPACT: 4,
    Structure.FULL: 32,
}

# Ring bits per layer before the 16*L growth term
_LAYER_BASE_BITS = {
    Structure.COMPACT: 88,
    Structure.FULL: 112,
}


def word_bit_count_for_layers(data_layers: int) -> int:
    """
    Codeword width in bits for a given number of data layers.
    
    Layers 1-2 use 6-bit words, 3-8 use 8, 9-22 use 10 and 23-32 use 12.
    
    Raises:
        ValueError: If data_layers is outside 1..32
    """
    if data_layers < 1 or data_layers > 32:
        raise ValueError(f"data_layers must be in [1, 32], got {data_layers}")
    
    if data_layers <= 2:
        return 6
    elif data_layers <= 8:
        return 8
    elif data_layers <= 22:
        return 10
    return 12


def capacity_bits(data_layers: int, structure: Structure) -> int:
    """Total number of bits stored in the data layers."""
    return (_LAYER_BASE_BITS[structure] + 16 * data_layers) * data_layers


@dataclass
class AztecMarker:
    """Description of a detected Aztec symbol and its decoded results."""
    data_layers: int
    structure: Structure = Structure.FULL
    message_word_count: int = 0
    raw_bits: Optional[bytes] = None  # MSB-first, at least capacity_bits long
    
    # Outputs, written by AztecDecoder
    corrected: Optional[bytes] = None
    total_bit_errors: int = 0
    message: Optional[str] = None
    
    @property
    def word_bit_count(self) -> int:
        return word_bit_count_for_layers(self.data_layers)
    
    @property
    def capacity_bits(self) -> int:
        return capacity_bits(self.data_layers, self.structure)
    
    @property
    def capacity_words(self) -> int:
        return self.capacity_bits // self.word_bit_count
    
    @property
    def parity_word_count(self) -> int:
        return self.capacity_words - self.message_word_count
    
    def validate(self) -> None:
        """
        Check the preconditions the decoder relies on.
        
        Raises:
            ValueError: If the marker is not set up correctly
        """
        if self.data_layers < 1:
            raise ValueError(f"data_layers must be >= 1, got {self.data_layers}")
        if self.data_layers > MAX_LAYERS[self.structure]:
            raise ValueError(
                f"{self.structure.value} marker cannot have {self.data_layers} layers "
                f"(max {MAX_LAYERS[self.structure]})"
            )
        if self.raw_bits is None:
            raise ValueError("raw_bits must be set before decoding")
        if len(self.raw_bits) * 8 < self.capacity_bits:
            raise ValueError(
                f"raw_bits holds {len(self.raw_bits) * 8} bits, "
                f"capacity is {self.capacity_bits}"
            )
        if not 0 <= self.message_word_count <= self.capacity_words:
            raise ValueError(
                f"message_word_count {self.message_word_count} outside "
                f"[0, {self.capacity_words}]"
            )
