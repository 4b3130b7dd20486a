# file: src/aztec_decoder/errors.py

"""
Aztec decoder exception hierarchy.

All exceptions inherit from AztecError for unified handling.
"""


class AztecError(Exception):
    """Base exception for all Aztec decoding errors."""
    pass


class ECCError(AztecError):
    """Raised when the Reed-Solomon stage fails."""
    pass


class ECCCorrectionError(ECCError):
    """Raised when error correction capability is exceeded."""
    
    def __init__(self, message: str, num_errors: int = None, max_correctable: int = None):
        super().__init__(message)
        self.num_errors = num_errors
        self.max_correctable = max_correctable


class MessageDecodingError(AztecError):
    """Raised when the corrected bits cannot be turned into a message."""
    
    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        self.reason = reason


class ConfigurationError(AztecError):
    """Raised when decoder configuration is invalid."""
    pass
