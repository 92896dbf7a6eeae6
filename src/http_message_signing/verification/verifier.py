"""
HTTP message signature verifier

The verifier reads the ``Signature`` header of a message, rebuilds the signing
string for the headers it lists and checks the signature with the key the
``keyId`` resolves to.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from ..exceptions import ErrorCodes, KeyNotFoundError
from ..signing.algorithms import AlgorithmKind, CryptoProvider
from ..signing.header import SignatureHeaderElements
from ..signing.signing_string import SigningStringBuilder
from ..signing.types import HEADER_SIGNATURE, HttpMessage, KeyMap
from ..signing.utils import from_base64
from .types import VerificationError

logger = logging.getLogger(__name__)


class HttpMessageSignatureVerifier:
    """
    Verifies signed HTTP requests and responses

    A signature that does not match yields False. A message that cannot be
    verified (missing Signature parameters, missing signed headers, unknown
    key id or algorithm name) raises VerificationError. Failures of the
    cryptographic setup itself, a provider lacking the algorithm or a key
    that does not fit it, propagate unwrapped.
    """

    def __init__(self, key_map: KeyMap, provider: Optional[CryptoProvider] = None):
        """
        Initialize the verifier.

        Args:
            key_map: Key source resolving ``keyId`` values
            provider: Optional crypto provider overriding the default one
        """
        if not isinstance(key_map, KeyMap):
            raise TypeError(f"key_map must be a KeyMap, got {type(key_map).__name__}")
        self.key_map = key_map
        self.provider = provider
        self._key_by_kind: Dict[AlgorithmKind, Callable[[str], Any]] = {
            AlgorithmKind.PUBLIC_KEY: self._public_key,
            AlgorithmKind.SECRET_KEY: self._secret_key,
        }

    def verify(self, message: HttpMessage) -> bool:
        """
        Verify the signature of a message without modifying it.

        Args:
            message: Signed request or response

        Returns:
            bool: True if the signature matches, False otherwise

        Raises:
            VerificationError: If the message cannot be verified
            UnsupportedAlgorithmError: If the provider lacks the algorithm
            InvalidKeyError: If the resolved key does not fit the algorithm
        """
        try:
            elements, data, key = self._prepare(message)
        except Exception as e:
            logger.debug(f"Unable to verify message: {e}")
            raise VerificationError.for_message(message) from e

        signature = from_base64(elements.signature)
        if signature is None:
            logger.debug(f"Signature of key '{elements.key_id}' is not valid base64")
            return False

        algorithm = elements.algorithm
        if algorithm.kind is AlgorithmKind.SECRET_KEY:
            valid = algorithm.create_mac(self.provider).verify(key, data, signature)
        else:
            valid = algorithm.create_signature(self.provider).verify(key, data, signature)
        logger.debug(f"Signature of key '{elements.key_id}' is {'valid' if valid else 'invalid'}")
        return valid

    def _prepare(self, message: HttpMessage) -> Tuple[SignatureHeaderElements, bytes, Any]:
        elements = SignatureHeaderElements.from_header_values(message.header_values(HEADER_SIGNATURE))
        signing_string = SigningStringBuilder(elements.signed_headers).signing_string(message)
        logger.debug(f"Verifying signature of key '{elements.key_id}' over:\n{signing_string}")

        key = self._key_by_kind[elements.algorithm.kind](elements.key_id)
        return elements, signing_string.encode('ascii', errors='replace'), key

    def _public_key(self, key_id: str):
        public_key = self.key_map.get_public_key(key_id)
        if public_key is None:
            raise _key_not_found("public", key_id)
        return public_key

    def _secret_key(self, key_id: str):
        secret_key = self.key_map.get_secret_key(key_id)
        if secret_key is None:
            raise _key_not_found("secret", key_id)
        return secret_key


def _key_not_found(role: str, key_id: str) -> KeyNotFoundError:
    return KeyNotFoundError(
        f"No {role} key found for key id '{key_id}'",
        ErrorCodes.KEY_NOT_FOUND,
        {"key_id": key_id}
    )


def create_verifier(key_map: KeyMap, provider: Optional[CryptoProvider] = None) -> HttpMessageSignatureVerifier:
    """
    Create a message signature verifier.

    Args:
        key_map: Key source resolving ``keyId`` values
        provider: Optional crypto provider

    Returns:
        HttpMessageSignatureVerifier: Configured verifier
    """
    return HttpMessageSignatureVerifier(key_map, provider)


def verify_signature(message: HttpMessage, key_map: KeyMap, provider: Optional[CryptoProvider] = None) -> bool:
    """
    Convenience function to verify a single message.

    Args:
        message: Signed request or response
        key_map: Key source resolving ``keyId`` values
        provider: Optional crypto provider

    Returns:
        bool: True if the signature matches
    """
    return create_verifier(key_map, provider).verify(message)
