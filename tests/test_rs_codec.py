# file: tests/test_rs_codec.py

"""
Unit tests for the Reed-Solomon codec and marker geometry.

Test coverage:
    - Field selection per codeword width
    - Correction within and beyond capability
    - Switching between fields in one process
    - Codecs used from separate threads
    - Marker capacity and word width tables
"""

import random
import threading

import pytest

from aztec_decoder import (
    AztecMarker,
    ECCCorrectionError,
    PRIMITIVE_POLYNOMIALS,
    ReedSolomonCodec,
    Structure,
    word_bit_count_for_layers,
)


def make_codeword(word_bits, num_data, nsym, seed=0):
    rng = random.Random(seed)
    data = [rng.randint(0, (1 << word_bits) - 1) for _ in range(num_data)]
    codec = ReedSolomonCodec(word_bits)
    codec.generator(nsym)
    parity = codec.encode(data)
    return codec, data, parity


def corrupt(words, positions, word_bits):
    corrupted = list(words)
    for pos in positions:
        corrupted[pos] ^= (1 << word_bits) - 1
    return corrupted


class TestReedSolomonCodec:
    """Test Reed-Solomon codec implementation."""
    
    def test_field_constants(self):
        """Primitive polynomials are the fixed Aztec values."""
        assert PRIMITIVE_POLYNOMIALS == {6: 67, 8: 301, 10: 1033, 12: 4201}
    
    def test_initialization_invalid_width(self):
        """Only 6, 8, 10 and 12 bit codewords exist."""
        with pytest.raises(ValueError, match="Unsupported codeword width"):
            ReedSolomonCodec(7)
    
    def test_generator_rejects_too_many_parity_words(self):
        """Parity count must fit in the field."""
        codec = ReedSolomonCodec(6)
        with pytest.raises(ValueError):
            codec.generator(63)
    
    def test_encode_length(self):
        """encode() returns exactly nsym parity words in range."""
        _, _, parity = make_codeword(6, 10, 7)
        assert len(parity) == 7
        assert all(0 <= p < 64 for p in parity)
    
    @pytest.mark.parametrize("word_bits", [6, 8, 10])
    def test_clean_codeword_has_no_errors(self, word_bits):
        """An uncorrupted codeword reports zero corrections."""
        codec, data, parity = make_codeword(word_bits, 12, 8)
        
        data_words, ecc_words = list(data), list(parity)
        assert codec.correct(data_words, ecc_words) == 0
        assert data_words == data
    
    @pytest.mark.parametrize("word_bits", [6, 8, 10, 12])
    def test_error_correction_within_capability(self, word_bits):
        """Up to nsym // 2 corrupted words are repaired."""
        codec, data, parity = make_codeword(word_bits, 12, 8, seed=word_bits)
        
        received = corrupt(data + parity, [0, 5, 13, 19], word_bits)
        data_words, ecc_words = received[:12], received[12:]
        
        assert codec.correct(data_words, ecc_words) == 4
        assert data_words == data
        assert ecc_words == parity
    
    def test_error_correction_exceeds_capability(self):
        """Too many errors raise ECCCorrectionError with diagnostics."""
        codec, data, parity = make_codeword(8, 20, 16, seed=3)
        
        received = corrupt(data + parity, range(0, 36, 3), 8)
        
        with pytest.raises(ECCCorrectionError) as exc_info:
            codec.correct(received[:20], received[20:])
        
        assert exc_info.value.max_correctable == 8
    
    def test_parity_count_mismatch(self):
        """correct() must be given as many parity words as generator() selected."""
        codec, data, parity = make_codeword(6, 5, 6)
        with pytest.raises(ValueError, match="parity words"):
            codec.correct(list(data), list(parity[:-1]))
    
    def test_no_parity_words(self):
        """With zero parity words nothing can be corrected and nothing fails."""
        codec = ReedSolomonCodec(8)
        codec.generator(0)
        
        assert codec.encode([1, 2, 3]) == []
        assert codec.correct([1, 2, 3], []) == 0
    
    def test_switching_fields(self):
        """Codecs of different widths can be interleaved."""
        codec10, data10, parity10 = make_codeword(10, 6, 6, seed=10)
        codec6, data6, parity6 = make_codeword(6, 6, 6, seed=6)
        
        received = corrupt(data10 + parity10, [2], 10)
        data_words, ecc_words = received[:6], received[6:]
        assert codec10.correct(data_words, ecc_words) == 1
        assert data_words == data10
        
        received = corrupt(data6 + parity6, [7], 6)
        data_words, ecc_words = received[:6], received[6:]
        assert codec6.correct(data_words, ecc_words) == 1
        assert data_words == data6


class TestThreading:
    """Codecs of different widths on separate threads."""
    
    def test_codecs_on_separate_threads(self):
        """Each thread keeps correcting its own field while the other runs."""
        failures = []
        
        def worker(word_bits, num_data, nsym, seed):
            codec, data, parity = make_codeword(word_bits, num_data, nsym, seed=seed)
            try:
                for i in range(200):
                    assert codec.encode(data) == parity
                    broken_data = corrupt(data, [i % num_data], word_bits)
                    broken_parity = list(parity)
                    assert codec.correct(broken_data, broken_parity) == 1
                    assert broken_data == data
                    assert broken_parity == parity
            except Exception as e:
                failures.append((word_bits, repr(e)))
        
        threads = [
            threading.Thread(target=worker, args=(6, 20, 10, 1)),
            threading.Thread(target=worker, args=(8, 60, 40, 2)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert failures == []


class TestMarkerGeometry:
    """Test capacity and word width tables."""
    
    @pytest.mark.parametrize("layers,expected", [
        (1, 6), (2, 6), (3, 8), (8, 8), (9, 10), (22, 10), (23, 12), (32, 12)
    ])
    def test_word_bit_count(self, layers, expected):
        assert word_bit_count_for_layers(layers) == expected
    
    def test_word_bit_count_invalid(self):
        with pytest.raises(ValueError):
            word_bit_count_for_layers(0)
        with pytest.raises(ValueError):
            word_bit_count_for_layers(33)
    
    def test_capacity_compact(self):
        marker = AztecMarker(data_layers=1, structure=Structure.COMPACT)
        assert marker.capacity_bits == 104
        assert marker.capacity_words == 17
        
        marker = AztecMarker(data_layers=4, structure=Structure.COMPACT)
        assert marker.capacity_words == 76
    
    def test_capacity_full(self):
        marker = AztecMarker(data_layers=1)
        assert marker.capacity_bits == 128
        assert marker.capacity_words == 21
        
        marker = AztecMarker(data_layers=32)
        assert marker.capacity_words == 1664
    
    def test_parity_word_count(self):
        marker = AztecMarker(data_layers=2, message_word_count=10)
        assert marker.parity_word_count == marker.capacity_words - 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
