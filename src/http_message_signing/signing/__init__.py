"""
HTTP Message Signing - Signing Module

Signing of HTTP requests and responses with the ``Signature`` header scheme,
using RSA, ECDSA or HMAC keys resolved through a key map.
"""

from .types import (
    HttpMessage,
    HttpRequest,
    HttpResponse,
    Request,
    Response,
    KeyMap,
    DictKeyMap,
    REQUEST_TARGET,
    RESPONSE_STATUS,
)

from .algorithms import (
    Algorithm,
    AlgorithmKind,
    CryptoProvider,
    CryptographyProvider,
    SignaturePrimitive,
    MacPrimitive,
    default_provider,
)

from .signing_string import (
    SigningStringBuilder,
    build_signing_string,
)

from .header import (
    SignatureHeaderElements,
    DEFAULT_SIGNED_HEADERS,
)

from .signing_config import (
    SignerConfig,
    SigningConfigBuilder,
    create_signing_config,
)

from .signer import (
    HttpMessageSigner,
    create_signer,
)

from .utils import (
    format_http_date,
    load_private_key_pem,
    load_public_key_pem,
    strong_random_available,
)

from .integration import (
    HttpSignatureAuth,
    PreparedRequestMessage,
    ResponseMessage,
    SigningSession,
    create_signing_session,
    verify_response,
)

# Public API exports
__all__ = [
    # Messages and keys
    'HttpMessage',
    'HttpRequest',
    'HttpResponse',
    'Request',
    'Response',
    'KeyMap',
    'DictKeyMap',
    'REQUEST_TARGET',
    'RESPONSE_STATUS',

    # Algorithms
    'Algorithm',
    'AlgorithmKind',
    'CryptoProvider',
    'CryptographyProvider',
    'SignaturePrimitive',
    'MacPrimitive',
    'default_provider',

    # Signing string and header
    'SigningStringBuilder',
    'build_signing_string',
    'SignatureHeaderElements',
    'DEFAULT_SIGNED_HEADERS',

    # Signer
    'SignerConfig',
    'SigningConfigBuilder',
    'create_signing_config',
    'HttpMessageSigner',
    'create_signer',

    # Utilities
    'format_http_date',
    'load_private_key_pem',
    'load_public_key_pem',
    'strong_random_available',

    # HTTP client integration
    'HttpSignatureAuth',
    'PreparedRequestMessage',
    'ResponseMessage',
    'SigningSession',
    'create_signing_session',
    'verify_response',
]
