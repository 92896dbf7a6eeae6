"""
Exception classes for HTTP message signing
"""

from typing import Optional, Dict, Any


class HttpSignatureError(Exception):
    """Base exception for all HTTP message signing errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', error_code='{self.error_code}', details={self.details})"


class ConfigurationError(HttpSignatureError):
    """Exception raised when a signer or verifier is built from invalid configuration"""
    pass


class CanonicalizationError(HttpSignatureError):
    """Exception raised when the signing string cannot be built from a message"""
    pass


class SignatureHeaderError(HttpSignatureError):
    """Exception raised for malformed or incomplete Signature headers"""
    pass


class SignatureSecurityError(HttpSignatureError):
    """Exception raised when the cryptographic setup cannot sign or verify"""
    pass


class UnsupportedAlgorithmError(SignatureSecurityError):
    """Exception raised for algorithm names or provider combinations that are not supported"""
    pass


class KeyNotFoundError(SignatureSecurityError):
    """Exception raised when the key map has no key for a key identifier"""
    pass


class InvalidKeyError(SignatureSecurityError):
    """Exception raised when a key cannot be used with the requested algorithm"""
    pass


class ErrorCodes:
    """Standard error codes for signing and verification operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    MISSING_DATE_HEADER_TO_SIGN = "MISSING_DATE_HEADER_TO_SIGN"
    MISSING_REQUEST_TARGET_TO_SIGN = "MISSING_REQUEST_TARGET_TO_SIGN"

    # Canonicalization errors
    MISSING_DATE_HEADER = "MISSING_DATE_HEADER"
    MISSING_HEADERS = "MISSING_HEADERS"
    INVALID_MESSAGE_ROLE = "INVALID_MESSAGE_ROLE"

    # Signature header errors
    MISSING_REQUIRED_PROPERTIES = "MISSING_REQUIRED_PROPERTIES"
    INVALID_SIGNATURE_HEADER = "INVALID_SIGNATURE_HEADER"

    # Security errors
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    INVALID_KEY = "INVALID_KEY"

    # Verification errors
    VERIFICATION_FAILED = "VERIFICATION_FAILED"
