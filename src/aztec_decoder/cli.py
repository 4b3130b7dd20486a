# file: src/aztec_decoder/cli.py

"""
Command line decoder for raw Aztec bit dumps.

Usage:
    aztec-decode --layers 2 --message-words 10 --bits 0f3a...
    aztec-decode --layers 3 --compact --message-words 12 --bits-file dump.hex
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config, setup_logging
from .decoder import AztecDecoder
from .marker import AztecMarker, Structure

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DECODE_FAILED = 1
EXIT_BAD_INPUT = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Decode the message stored in raw Aztec marker bits',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full-range marker, bits given inline as hex
  aztec-decode --layers 2 --message-words 10 --bits 0f3a...

  # Compact marker, hex read from a file, trace every symbol
  aztec-decode --layers 3 --compact --message-words 12 \\
      --bits-file dump.hex --verbose
        """
    )
    
    parser.add_argument(
        '--layers',
        type=int,
        required=True,
        help='Number of data layers in the marker'
    )
    
    parser.add_argument(
        '--compact',
        action='store_true',
        help='Marker uses the compact structure'
    )
    
    parser.add_argument(
        '--message-words',
        type=int,
        required=True,
        help='Number of data codewords, read from the mode message'
    )
    
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--bits',
        type=str,
        help='Raw layer bits as hex, MSB first'
    )
    source.add_argument(
        '--bits-file',
        type=str,
        help='File containing raw layer bits as hex'
    )
    
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file (default: packaged default_config.yaml)'
    )
    
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging and symbol trace'
    )
    
    return parser.parse_args(argv)


def read_hex(text: str) -> bytes:
    """Parse hex text, ignoring whitespace and an optional 0x prefix."""
    cleaned = "".join(text.split())
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config(args.config)
    setup_logging(config, verbose=args.verbose)
    
    try:
        if args.bits_file is not None:
            with open(args.bits_file, 'r') as f:
                raw_bits = read_hex(f.read())
        else:
            raw_bits = read_hex(args.bits)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read bits: {e}")
        return EXIT_BAD_INPUT
    
    marker = AztecMarker(
        data_layers=args.layers,
        structure=Structure.COMPACT if args.compact else Structure.FULL,
        message_word_count=args.message_words,
        raw_bits=raw_bits
    )
    
    decoder = AztecDecoder(config)
    if args.verbose:
        # Trace lines already reach stderr through the DEBUG logger
        decoder.set_verbose(None)
    
    try:
        success = decoder.process(marker)
    except ValueError as e:
        logger.error(f"Invalid marker: {e}")
        return EXIT_BAD_INPUT
    
    if not success:
        logger.error(f"Decoding failed: {decoder.failure_reason}")
        return EXIT_DECODE_FAILED
    
    logger.info(f"Corrected {marker.total_bit_errors} codewords")
    print(marker.message)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
