# file: src/aztec_decoder/__init__.py

"""
Aztec Code message decoder

Turns the raw bits sampled from a located Aztec marker into its text
message: Reed-Solomon correction, stuffing bit removal and the
upper/lower/mixed/punct/digit text state machine.

Public API:
    - AztecDecoder(config).process(marker) -> bool
    - decode_marker(marker, config) -> str
    - strip_padding(bits, word_bit_count) -> PackedBits
    - load_config(path) -> dict
"""

from .bits import PackedBits, bit_to_byte_count
from .config import load_config, get_default_config, setup_logging
from .decoder import AztecDecoder, decode_marker, split_words, pack_words
from .marker import AztecMarker, Structure, word_bit_count_for_layers
from .modes import Encoding, Action, dispatch
from .padding import strip_padding
from .rs_codec import ReedSolomonCodec, PRIMITIVE_POLYNOMIALS
from .errors import (
    AztecError,
    ECCError,
    ECCCorrectionError,
    MessageDecodingError,
    ConfigurationError,
)

__version__ = "1.0.0"

__all__ = [
    "AztecDecoder",
    "decode_marker",
    "split_words",
    "pack_words",
    "AztecMarker",
    "Structure",
    "word_bit_count_for_layers",
    "Encoding",
    "Action",
    "dispatch",
    "strip_padding",
    "PackedBits",
    "bit_to_byte_count",
    "ReedSolomonCodec",
    "PRIMITIVE_POLYNOMIALS",
    "load_config",
    "get_default_config",
    "setup_logging",
    "AztecError",
    "ECCError",
    "ECCCorrectionError",
    "MessageDecodingError",
    "ConfigurationError",
]
