"""
HTTP Message Signing
Signing and verification of HTTP messages with the Signature header
"""

from .version import __version__
from .exceptions import (
    HttpSignatureError,
    ConfigurationError,
    CanonicalizationError,
    SignatureHeaderError,
    SignatureSecurityError,
    UnsupportedAlgorithmError,
    KeyNotFoundError,
    InvalidKeyError,
    ErrorCodes,
)
from .signing import (
    HttpMessage,
    HttpRequest,
    HttpResponse,
    Request,
    Response,
    KeyMap,
    DictKeyMap,
    Algorithm,
    AlgorithmKind,
    CryptoProvider,
    CryptographyProvider,
    SigningStringBuilder,
    SignatureHeaderElements,
    SignerConfig,
    SigningConfigBuilder,
    create_signing_config,
    HttpMessageSigner,
    create_signer,
    load_private_key_pem,
    load_public_key_pem,
    HttpSignatureAuth,
    SigningSession,
    create_signing_session,
)
from .verification import (
    VerificationError,
    HttpMessageSignatureVerifier,
    create_verifier,
    verify_signature,
    SignatureVerificationMiddleware,
)
from .config import (
    HttpSignatureSettings,
    configure_logging,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'HttpSignatureError',
    'ConfigurationError',
    'CanonicalizationError',
    'SignatureHeaderError',
    'SignatureSecurityError',
    'UnsupportedAlgorithmError',
    'KeyNotFoundError',
    'InvalidKeyError',
    'ErrorCodes',
    'VerificationError',
    # Messages and keys
    'HttpMessage',
    'HttpRequest',
    'HttpResponse',
    'Request',
    'Response',
    'KeyMap',
    'DictKeyMap',
    'load_private_key_pem',
    'load_public_key_pem',
    # Algorithms
    'Algorithm',
    'AlgorithmKind',
    'CryptoProvider',
    'CryptographyProvider',
    # Signing
    'SigningStringBuilder',
    'SignatureHeaderElements',
    'SignerConfig',
    'SigningConfigBuilder',
    'create_signing_config',
    'HttpMessageSigner',
    'create_signer',
    # Verification
    'HttpMessageSignatureVerifier',
    'create_verifier',
    'verify_signature',
    'SignatureVerificationMiddleware',
    # HTTP client integration
    'HttpSignatureAuth',
    'SigningSession',
    'create_signing_session',
    # Configuration
    'HttpSignatureSettings',
    'configure_logging',
]
