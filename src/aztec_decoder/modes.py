# file: src/aztec_decoder/modes.py

"""
Character tables for the Aztec text encodings.

Each handler maps one symbol value to an Action. Handlers are pure; the
latch/shift bookkeeping lives in AztecDecoder.bits_to_message().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional


class Encoding(Enum):
    """Text encodings of the Aztec high-level data stream."""
    UPPER = "upper"
    LOWER = "lower"
    MIXED = "mixed"
    PUNCT = "punct"
    DIGIT = "digit"
    # Binary shift is entered but never decoded, see handle_byte()
    BYTE = "byte"

    @property
    def word_size(self) -> int:
        """Bits used by one symbol in this encoding."""
        return WORD_SIZES[self]


WORD_SIZES = {
    Encoding.UPPER: 5,
    Encoding.LOWER: 5,
    Encoding.MIXED: 5,
    Encoding.PUNCT: 5,
    Encoding.DIGIT: 4,
    Encoding.BYTE: 5,
}


@dataclass(frozen=True)
class Action:
    """
    Result of decoding one symbol.
    
    Attributes:
        text: Characters to append to the message
        mode: Encoding to switch to, or None to stay
        latched: False when the switch only applies to the next symbol
        failure: Reason the decode must stop, or None
    """
    text: str = ""
    mode: Optional[Encoding] = None
    latched: bool = True
    failure: Optional[str] = None


def _append(text: str) -> Action:
    return Action(text=text)


def _latch(mode: Encoding) -> Action:
    return Action(mode=mode)


def _shift(mode: Encoding) -> Action:
    return Action(mode=mode, latched=False)


def _fail(reason: str) -> Action:
    return Action(failure=reason)


NOTHING = Action()


def handle_upper(value: int) -> Action:
    if value == 0:
        return _shift(Encoding.PUNCT)
    elif value == 1:
        return _append(' ')
    elif value <= 27:
        return _append(chr(ord('A') + value - 2))
    elif value == 28:
        return _latch(Encoding.LOWER)
    elif value == 29:
        return _latch(Encoding.MIXED)
    elif value == 30:
        return _latch(Encoding.DIGIT)
    elif value == 31:
        return _shift(Encoding.BYTE)
    return NOTHING


def handle_lower(value: int) -> Action:
    if value == 0:
        return _shift(Encoding.PUNCT)
    elif value == 1:
        return _append(' ')
    elif value <= 27:
        return _append(chr(ord('a') + value - 2))
    elif value == 28:
        return _shift(Encoding.UPPER)
    elif value == 29:
        return _latch(Encoding.MIXED)
    elif value == 30:
        return _latch(Encoding.DIGIT)
    elif value == 31:
        return _shift(Encoding.BYTE)
    return NOTHING


_MIXED_SPECIALS = {
    20: '@',
    21: '\\',
    25: '|',
    26: '~',
    27: chr(127),
}


def handle_mixed(value: int) -> Action:
    """Control characters and the symbols missing from the other tables."""
    if value == 0:
        return _shift(Encoding.PUNCT)
    elif value == 1:
        return _append(' ')
    elif value <= 14:
        # ^A .. ^M
        return _append(chr(value - 1))
    elif value <= 19:
        return _append(chr(value + 8))
    elif value in _MIXED_SPECIALS:
        return _append(_MIXED_SPECIALS[value])
    elif value <= 24:
        # ^ _ `
        return _append(chr(value + 72))
    elif value == 28:
        return _latch(Encoding.LOWER)
    elif value == 29:
        return _latch(Encoding.UPPER)
    elif value == 30:
        return _latch(Encoding.PUNCT)
    elif value == 31:
        return _shift(Encoding.BYTE)
    return NOTHING


_PUNCT_SPECIALS = {
    1: '\r',
    2: '\r\n',
    3: '. ',
    4: ', ',
    5: ': ',
    27: '[',
    28: ']',
    29: '{',
    30: '}',
}


def handle_punct(value: int) -> Action:
    if value == 0:
        # FLG(n) introduces ECI / FNC1, neither is supported
        return _fail("FLG(n) encountered")
    elif value in _PUNCT_SPECIALS:
        return _append(_PUNCT_SPECIALS[value])
    elif value == 31:
        return _latch(Encoding.UPPER)
    elif value <= 20:
        # ! through /
        return _append(chr(value + 27))
    elif value <= 26:
        # : ; < = > ?
        return _append(chr(value + 37))
    return NOTHING


def handle_digit(value: int) -> Action:
    if value == 0:
        return _shift(Encoding.PUNCT)
    elif value == 1:
        return _append(' ')
    elif value <= 11:
        return _append(chr(ord('0') + value - 2))
    elif value == 12:
        return _append(',')
    elif value == 13:
        return _append('.')
    elif value == 14:
        return _latch(Encoding.UPPER)
    elif value == 15:
        return _shift(Encoding.UPPER)
    return NOTHING


def handle_byte(value: int) -> Action:
    # TODO decode the binary shift length prefix and the 8-bit bytes that follow
    return _fail("Unhandled encoding: BYTE")


HANDLERS: Dict[Encoding, Callable[[int], Action]] = {
    Encoding.UPPER: handle_upper,
    Encoding.LOWER: handle_lower,
    Encoding.MIXED: handle_mixed,
    Encoding.PUNCT: handle_punct,
    Encoding.DIGIT: handle_digit,
    Encoding.BYTE: handle_byte,
}


def dispatch(encoding: Encoding, value: int) -> Action:
    """Decode one symbol read while `encoding` is active."""
    return HANDLERS[encoding](value)
