"""
HTTP message signer

The signer builds the signing string of a message for the configured headers,
signs it with the key resolved from the key map and appends the parameters of
the ``Signature`` header to the message.
"""

import logging
from typing import Callable, Dict, Tuple

from ..exceptions import ErrorCodes, KeyNotFoundError
from .algorithms import AlgorithmKind
from .header import format_param, format_signed_headers
from .signing_config import SignerConfig
from .signing_string import SigningStringBuilder
from .types import (
    HEADER_SIGNATURE,
    PARAM_ALGORITHM,
    PARAM_HEADERS,
    PARAM_KEY_ID,
    PARAM_SIGNATURE,
    HttpMessage,
)
from .utils import strong_random_available, to_base64

logger = logging.getLogger(__name__)


class HttpMessageSigner:
    """
    Signs HTTP requests and responses

    The signer holds only its immutable configuration and can be shared
    between threads.
    """

    def __init__(self, config: SignerConfig):
        """
        Initialize the signer with configuration.

        Runs the process-wide strong random source check at startup; it only
        logs a warning when the source is missing and signing still proceeds.

        Args:
            config: Validated signer configuration
        """
        self.config = config
        self._signing_strings = SigningStringBuilder(config.headers_to_sign)
        self._sign_by_kind: Dict[AlgorithmKind, Callable[[bytes], bytes]] = {
            AlgorithmKind.PUBLIC_KEY: self._sign_with_private_key,
            AlgorithmKind.SECRET_KEY: self._sign_with_secret_key,
        }
        strong_random_available()

    @property
    def key_id(self) -> str:
        return self.config.key_id

    @property
    def headers_to_sign(self) -> Tuple[str, ...]:
        return self.config.headers_to_sign

    def sign(self, message: HttpMessage) -> HttpMessage:
        """
        Sign a message in place.

        Appends one ``Signature`` header per parameter: ``keyId``,
        ``algorithm``, ``headers`` (only when headers are configured) and
        ``signature``.

        Args:
            message: Request or response to sign

        Returns:
            HttpMessage: The same message, carrying the Signature headers

        Raises:
            CanonicalizationError: If the message lacks a header to sign
            KeyNotFoundError: If the key map has no key for the key id
            UnsupportedAlgorithmError: If the provider lacks the algorithm
            InvalidKeyError: If the key does not fit the algorithm
        """
        signing_string = self._signing_strings.signing_string(message)
        logger.debug(f"Signing string for key '{self.key_id}':\n{signing_string}")

        data = signing_string.encode('ascii', errors='replace')
        signature = to_base64(self._sign_by_kind[self.config.algorithm.kind](data))

        message.add_header(HEADER_SIGNATURE, format_param(PARAM_KEY_ID, self.key_id))
        message.add_header(HEADER_SIGNATURE, format_param(PARAM_ALGORITHM, self.config.algorithm.algorithm_name))
        if self.headers_to_sign:
            message.add_header(
                HEADER_SIGNATURE,
                format_param(PARAM_HEADERS, format_signed_headers(self.headers_to_sign))
            )
        message.add_header(HEADER_SIGNATURE, format_param(PARAM_SIGNATURE, signature))

        logger.debug(f"Signed message with key '{self.key_id}' using {self.config.algorithm.algorithm_name}")
        return message

    def _sign_with_private_key(self, data: bytes) -> bytes:
        private_key = self.config.key_map.get_private_key(self.key_id)
        if private_key is None:
            raise self._key_not_found("private")
        primitive = self.config.algorithm.create_signature(self.config.provider)
        return primitive.sign(private_key, data)

    def _sign_with_secret_key(self, data: bytes) -> bytes:
        secret_key = self.config.key_map.get_secret_key(self.key_id)
        if secret_key is None:
            raise self._key_not_found("secret")
        primitive = self.config.algorithm.create_mac(self.config.provider)
        return primitive.compute(secret_key, data)

    def _key_not_found(self, role: str) -> KeyNotFoundError:
        return KeyNotFoundError(
            f"No {role} key found for key id '{self.key_id}'",
            ErrorCodes.KEY_NOT_FOUND,
            {"key_id": self.key_id}
        )


def create_signer(config: SignerConfig) -> HttpMessageSigner:
    """
    Create a message signer.

    Args:
        config: Signer configuration

    Returns:
        HttpMessageSigner: Configured signer
    """
    return HttpMessageSigner(config)
