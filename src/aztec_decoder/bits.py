# file: src/aztec_decoder/bits.py

"""
Packed bit buffer.

Bits are stored most-significant-bit first, both inside a multi-bit word and
inside each byte of the packed representation.
"""

import numpy as np
from typing import Iterable, List, Optional


def bit_to_byte_count(num_bits: int) -> int:
    """Number of bytes needed to hold num_bits bits."""
    return (num_bits + 7) // 8


class PackedBits:
    """
    Growable bit array with MSB-first word access.
    
    Used for the raw symbol bits, the corrected data words and the
    destuffed stream read by the mode decoder.
    """
    
    def __init__(self, bits: Optional[Iterable[int]] = None):
        self.bits: List[int] = [int(b) & 1 for b in bits] if bits is not None else []
    
    @classmethod
    def wrap(cls, data: bytes, size: int) -> "PackedBits":
        """
        Unpack the first `size` bits of a byte buffer.
        
        Args:
            data: Packed bytes (big-endian bit order)
            size: Number of valid bits
        
        Raises:
            ValueError: If the buffer holds fewer than `size` bits
        """
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        if size > len(data) * 8:
            raise ValueError(
                f"Buffer has {len(data) * 8} bits, {size} requested"
            )
        if size == 0:
            return cls()
        
        unpacked = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8), bitorder='big')
        return cls(unpacked[:size].tolist())
    
    @classmethod
    def from_bit_string(cls, text: str) -> "PackedBits":
        """Build from a string such as '0110 1'. Whitespace is ignored."""
        cleaned = "".join(text.split())
        if any(c not in "01" for c in cleaned):
            raise ValueError(f"Bit string may only contain 0 and 1: {text!r}")
        return cls(int(c) for c in cleaned)
    
    @property
    def size(self) -> int:
        return len(self.bits)
    
    def __len__(self) -> int:
        return len(self.bits)
    
    def read(self, location: int, length: int) -> int:
        """Read `length` bits starting at `location` as an unsigned integer, MSB first."""
        if location < 0 or location + length > len(self.bits):
            raise IndexError(
                f"Read of {length} bits at {location} exceeds size {len(self.bits)}"
            )
        value = 0
        for bit in self.bits[location:location + length]:
            value = (value << 1) | bit
        return value
    
    def append(self, value: int, length: int) -> None:
        """Append the lowest `length` bits of `value`, MSB first."""
        for shift in range(length - 1, -1, -1):
            self.bits.append((value >> shift) & 1)
    
    def to_bytes(self) -> bytes:
        """
        Pack into bytes, big-endian bit order.
        
        The last byte is padded with zeros when size is not a multiple of 8.
        """
        if len(self.bits) == 0:
            return b''
        
        return bytes(np.packbits(np.array(self.bits, dtype=np.uint8), bitorder='big'))
    
    def to_bit_string(self) -> str:
        return "".join(str(b) for b in self.bits)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, PackedBits):
            return NotImplemented
        return self.bits == other.bits
    
    def __repr__(self) -> str:
        return f"PackedBits(size={self.size}, bits='{self.to_bit_string()}')"
