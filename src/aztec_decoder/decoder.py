# file: src/aztec_decoder/decoder.py

"""
Aztec message decoding entry point.

Pipeline:
    raw bits
    → word split + Reed-Solomon correction
    → corrected data bits
    → stuffing bit removal
    → text encoding state machine
    → message
"""

import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from .bits import PackedBits
from .config import get_default_config
from .errors import ECCCorrectionError, MessageDecodingError
from .marker import AztecMarker
from .modes import Encoding, dispatch
from .padding import strip_padding
from .rs_codec import PRIMITIVE_POLYNOMIALS, ReedSolomonCodec

logger = logging.getLogger(__name__)


def split_words(bits: PackedBits, word_bit_count: int, count: int, offset: int = 0) -> List[int]:
    """Read `count` consecutive MSB-first words starting at bit `offset`."""
    return [
        bits.read(offset + i * word_bit_count, word_bit_count)
        for i in range(count)
    ]


def pack_words(words: List[int], word_bit_count: int) -> PackedBits:
    """Inverse of split_words()."""
    bits = PackedBits()
    for value in words:
        bits.append(value, word_bit_count)
    return bits


class AztecDecoder:
    """
    Converts the raw bits read from an Aztec marker into a message.
    
    An instance holds reusable scratch buffers and the state of the text
    decoder, so it must not be shared between threads.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize decoder.
        
        Args:
            config: Configuration dictionary (from default_config.yaml)
        """
        self.config = config if config is not None else get_default_config()
        
        # One codec per Galois field. Which one is used depends on marker size.
        self.codecs = {
            word_bits: ReedSolomonCodec(word_bits)
            for word_bits in PRIMITIVE_POLYNOMIALS
        }
        
        # Scratch words handed to the codec
        self.storage_data_words: List[int] = []
        self.storage_ecc_words: List[int] = []
        
        # ------------------ state of text decoder -----------------
        self.current = Encoding.UPPER
        # Encoding to return to after a one symbol shift
        self.shift_encoding: Optional[Encoding] = None
        self.latched = False
        self.work: List[str] = []
        
        # Why the last process() call returned False
        self.failure_reason: Optional[str] = None
        
        self.verbose: Optional[TextIO] = None
        if self.config.get('decoder', {}).get('verbose', False):
            self.set_verbose(sys.stderr)
    
    def set_verbose(self, out: Optional[TextIO]) -> None:
        """Attach a stream that receives trace lines. None detaches it."""
        self.verbose = out
    
    def _trace(self, line: str) -> None:
        logger.debug(line)
        if self.verbose is not None:
            print(f"[AztecDecoder] {line}", file=self.verbose)
    
    def _fail(self, reason: str) -> bool:
        self.failure_reason = reason
        self._trace(reason)
        return False
    
    def process(self, marker: AztecMarker) -> bool:
        """
        Extract the message from this marker.
        
        On success marker.message, marker.corrected and
        marker.total_bit_errors are written. On failure marker.message is
        left untouched and failure_reason describes the problem.
        
        Args:
            marker: Marker which is to be decoded
        
        Returns:
            True if successful
        
        Raises:
            ValueError: If the marker has not been set up correctly
        """
        marker.validate()
        self.failure_reason = None
        
        word_bit_count = marker.word_bit_count
        codec = self.codecs.get(word_bit_count)
        if codec is None:
            raise ValueError(f"Unexpected word size: {word_bit_count}")
        
        # Apply error correction to the message
        if not self.apply_ecc(marker, codec):
            return False
        
        # Remove padding from the encoded bits
        padded_bits = PackedBits.wrap(marker.corrected, marker.message_word_count * word_bit_count)
        bits = strip_padding(padded_bits, word_bit_count)
        return self.bits_to_message(marker, bits)
    
    def apply_ecc(self, marker: AztecMarker, codec: ReedSolomonCodec) -> bool:
        """
        Apply error correction to the data portion of raw_bits, then copy
        the results into marker.corrected.
        
        Returns:
            True if nothing went wrong with error correction
        """
        word_bit_count = marker.word_bit_count
        bits = PackedBits.wrap(marker.raw_bits, marker.capacity_bits)
        
        # Convert the raw bits into words the codec understands
        num_data = marker.message_word_count
        num_ecc = marker.capacity_words - num_data
        self.storage_data_words[:] = split_words(bits, word_bit_count, num_data)
        self.storage_ecc_words[:] = split_words(
            bits, word_bit_count, num_ecc, offset=num_data * word_bit_count
        )
        
        # TODO mark words that are all zeros or all ones as known erasures
        
        codec.generator(num_ecc)
        try:
            marker.total_bit_errors = codec.correct(self.storage_data_words, self.storage_ecc_words)
        except ECCCorrectionError as e:
            logger.info(f"Marker with {marker.data_layers} layers failed ECC: {e}")
            return self._fail("ECC failed")
        
        # Save the corrected data
        corrected = pack_words(self.storage_data_words, word_bit_count)
        marker.corrected = corrected.to_bytes()
        
        return True
    
    def bits_to_message(self, marker: AztecMarker, bits: PackedBits) -> bool:
        """
        Convert the destuffed bits into a message.
        
        Returns:
            True if successful
        """
        # Reset the state
        self.latched = False
        self.shift_encoding = None
        self.work.clear()
        self.current = Encoding.UPPER
        
        location = 0
        while location + self.current.word_size <= bits.size:
            value = bits.read(location, self.current.word_size)
            self._trace(f"current={self.current.name} latched={self.latched} value={value}")
            
            location += self.current.word_size
            self.latched = True
            previous = self.current
            
            action = dispatch(previous, value)
            if action.failure is not None:
                return self._fail(action.failure)
            
            self.work.append(action.text)
            if action.mode is not None:
                self.current = action.mode
                self.latched = action.latched
            
            # A pending shift always returns to the encoding it came from,
            # even if the shifted symbol asked for another switch
            if self.shift_encoding is not None:
                self.current = self.shift_encoding
            self.shift_encoding = None if self.latched else previous
        
        marker.message = "".join(self.work)
        return True


def decode_marker(marker: AztecMarker, config: Optional[Dict[str, Any]] = None) -> str:
    """
    Decode a marker and return its message.
    
    Unlike AztecDecoder.process(), failure is reported with an exception.
    
    Raises:
        MessageDecodingError: If the marker cannot be decoded
        ValueError: If the marker has not been set up correctly
    
    Example:
        >>> try:
        ...     text = decode_marker(marker)
        ... except MessageDecodingError as e:
        ...     print(f"Decode failed: {e.reason}")
    """
    decoder = AztecDecoder(config)
    if not decoder.process(marker):
        raise MessageDecodingError(
            f"Failed to decode marker: {decoder.failure_reason}",
            reason=decoder.failure_reason
        )
    return marker.message
