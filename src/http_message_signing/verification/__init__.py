"""
HTTP Message Signing - Verification Module

Verification of signed requests and responses, and a WSGI middleware that
rejects requests whose signature does not verify.
"""

from .types import VerificationError

from .verifier import (
    HttpMessageSignatureVerifier,
    create_verifier,
    verify_signature,
)

from .middleware import (
    SignatureVerificationMiddleware,
    WsgiRequestMessage,
    create_verification_middleware,
)

__all__ = [
    'VerificationError',
    'HttpMessageSignatureVerifier',
    'create_verifier',
    'verify_signature',
    'SignatureVerificationMiddleware',
    'WsgiRequestMessage',
    'create_verification_middleware',
]
