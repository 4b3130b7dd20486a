# file: src/aztec_decoder/rs_codec.py

"""
Reed-Solomon codec for Aztec codewords.

Uses the reedsolo library for Galois Field arithmetic and RS correction.
Aztec uses a different field for each codeword width; the primitive
polynomials are fixed by ISO/IEC 24778 and are not searched for at runtime.
"""

import threading
from typing import List, Sequence

import reedsolo
from reedsolo import ReedSolomonError

from .errors import ECCCorrectionError


# Guards reedsolo's module-level field tables between init and use
_FIELD_LOCK = threading.Lock()


# Codeword width (bits) -> primitive polynomial of GF(2^width)
PRIMITIVE_POLYNOMIALS = {
    6: 67,       # x^6 + x + 1
    8: 301,      # x^8 + x^5 + x^3 + x^2 + 1
    10: 1033,    # x^10 + x^3 + 1
    12: 4201,    # x^12 + x^6 + x^5 + x^3 + 1
}

# Aztec check words use alpha = 2 with the first consecutive root at alpha^1
GENERATOR = 2
FIRST_CONSECUTIVE_ROOT = 1


class ReedSolomonCodec:
    """
    Reed-Solomon codec over GF(2^word_bits).
    
    Parameters:
        word_bits (int): Codeword width, one of 6, 8, 10, 12
    
    Invariants:
        - data + parity words <= 2^word_bits - 1
        - Corrects up to nsym // 2 symbol errors
    
    reedsolo keeps its field tables in module globals, so the tables are
    re-initialised before every encode/correct while holding a module
    lock. Codecs of different widths can therefore be used one after
    another, or from separate threads, in the same process.
    """
    
    def __init__(self, word_bits: int):
        if word_bits not in PRIMITIVE_POLYNOMIALS:
            raise ValueError(
                f"Unsupported codeword width {word_bits}, expected one of "
                f"{sorted(PRIMITIVE_POLYNOMIALS)}"
            )
        
        self.word_bits = word_bits
        self.primitive = PRIMITIVE_POLYNOMIALS[word_bits]
        self.max_codeword_length = (1 << word_bits) - 1
        
        self.nsym = 0
        self.max_correctable_errors = 0
        self._generator_poly = None
        self.total_errors = 0
    
    def _init_field(self) -> None:
        reedsolo.init_tables(self.primitive, GENERATOR, self.word_bits)
    
    def generator(self, nsym: int) -> None:
        """
        Select the number of parity words for the next encode/correct.
        
        Args:
            nsym: Number of parity (check) words
        """
        if nsym < 0 or nsym >= self.max_codeword_length:
            raise ValueError(
                f"nsym={nsym} outside [0, {self.max_codeword_length}) for GF(2^{self.word_bits})"
            )
        self.nsym = nsym
        self.max_correctable_errors = nsym // 2
        self._generator_poly = None
    
    def _check_length(self, length: int) -> None:
        if length > self.max_codeword_length:
            raise ValueError(
                f"Codeword of {length} words exceeds GF(2^{self.word_bits}) "
                f"limit of {self.max_codeword_length}"
            )
    
    def encode(self, data_words: Sequence[int]) -> List[int]:
        """
        Compute parity words for data_words.
        
        Returns:
            List of nsym parity words
        """
        self._check_length(len(data_words) + self.nsym)
        if self.nsym == 0:
            return []
        
        with _FIELD_LOCK:
            self._init_field()
            if self._generator_poly is None:
                self._generator_poly = reedsolo.rs_generator_poly(
                    self.nsym, fcr=FIRST_CONSECUTIVE_ROOT, generator=GENERATOR
                )

            encoded = reedsolo.rs_encode_msg(
                list(data_words), self.nsym,
                fcr=FIRST_CONSECUTIVE_ROOT, generator=GENERATOR, gen=self._generator_poly
            )
        return [int(v) for v in encoded[len(data_words):]]
    
    def correct(self, data_words: List[int], ecc_words: List[int]) -> int:
        """
        Correct data and parity words in place.
        
        Args:
            data_words: Data words, modified in place
            ecc_words: Parity words, modified in place; length must equal nsym
        
        Returns:
            Number of words that were corrected
        
        Raises:
            ECCCorrectionError: If errors exceed correction capability
        """
        if len(ecc_words) != self.nsym:
            raise ValueError(
                f"Expected {self.nsym} parity words, got {len(ecc_words)}. "
                f"Call generator() first."
            )
        self._check_length(len(data_words) + len(ecc_words))
        
        self.total_errors = 0
        if self.nsym == 0:
            return 0
        
        codeword = list(data_words) + list(ecc_words)
        try:
            with _FIELD_LOCK:
                self._init_field()
                rmes, recc, _ = reedsolo.rs_correct_msg(
                    codeword, self.nsym, fcr=FIRST_CONSECUTIVE_ROOT, generator=GENERATOR,
                    erase_pos=[]
                )
        except ReedSolomonError as e:
            raise ECCCorrectionError(
                f"Reed-Solomon correction failed: {e}",
                max_correctable=self.max_correctable_errors
            ) from e
        
        corrected = [int(v) for v in rmes] + [int(v) for v in recc]
        self.total_errors = sum(1 for a, b in zip(codeword, corrected) if a != b)
        
        data_words[:] = corrected[:len(data_words)]
        ecc_words[:] = corrected[len(data_words):]
        
        return self.total_errors
