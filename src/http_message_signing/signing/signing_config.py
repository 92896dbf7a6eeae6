"""
Configuration management for message signing

A ``SignerConfig`` is immutable and validated when it is constructed, so an
invalid combination of headers to sign never reaches signing time. The
``SigningConfigBuilder`` offers a fluent way to collect the fields.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from ..exceptions import ConfigurationError, ErrorCodes
from .algorithms import Algorithm, CryptoProvider
from .signing_string import dedupe_headers
from .types import HEADER_DATE, REQUEST_TARGET, KeyMap
from .utils import normalize_header_name


@dataclass(frozen=True)
class SignerConfig:
    """
    Configuration for a message signer

    Attributes:
        key_id: Identifier of the signing key, sent as ``keyId``
        key_map: Key source resolving ``key_id`` to key material
        algorithm: Signature algorithm
        headers_to_sign: Ordered header names to sign; empty signs ``Date`` only
        provider: Optional crypto provider overriding the default one
    """
    key_id: str
    key_map: KeyMap
    algorithm: Algorithm
    headers_to_sign: Tuple[str, ...] = ()
    provider: Optional[CryptoProvider] = None

    def __post_init__(self):
        if not self.key_id or not isinstance(self.key_id, str):
            raise ConfigurationError(
                "Key ID must be non-empty string",
                ErrorCodes.INVALID_CONFIG
            )

        if not isinstance(self.key_map, KeyMap):
            raise ConfigurationError(
                "Key map must be a KeyMap instance",
                ErrorCodes.INVALID_CONFIG
            )

        if not isinstance(self.algorithm, Algorithm):
            object.__setattr__(self, 'algorithm', Algorithm.from_name(self.algorithm))

        headers = tuple(dedupe_headers(self.headers_to_sign))
        object.__setattr__(self, 'headers_to_sign', headers)
        validate_headers_to_sign(headers)


def validate_headers_to_sign(headers: Iterable[str]) -> None:
    """
    Check that a non-empty header list signs ``date`` and ``(request-target)``.

    Raises:
        ConfigurationError: If either mandatory entry is missing
    """
    normalized = [normalize_header_name(h) for h in headers]
    if not normalized:
        return

    if normalize_header_name(HEADER_DATE) not in normalized:
        raise ConfigurationError(
            f"HttpMessageSigner should be configured to sign the '{HEADER_DATE}' header",
            ErrorCodes.MISSING_DATE_HEADER_TO_SIGN,
            {"headers_to_sign": list(headers)}
        )

    if REQUEST_TARGET not in normalized:
        raise ConfigurationError(
            f"HttpMessageSigner should be configured to sign the '{REQUEST_TARGET}' header",
            ErrorCodes.MISSING_REQUEST_TARGET_TO_SIGN,
            {"headers_to_sign": list(headers)}
        )


class SigningConfigBuilder:
    """
    Builder for creating signer configurations with fluent API
    """

    def __init__(self):
        self._key_id: Optional[str] = None
        self._key_map: Optional[KeyMap] = None
        self._algorithm: Optional[Algorithm] = None
        self._headers_to_sign: List[str] = []
        self._provider: Optional[CryptoProvider] = None

    def key_id(self, key_id: str) -> 'SigningConfigBuilder':
        """
        Set key identifier.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._key_id = key_id
        return self

    def key_map(self, key_map: KeyMap) -> 'SigningConfigBuilder':
        """
        Set the key source used to resolve the key identifier.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._key_map = key_map
        return self

    def algorithm(self, algorithm: Union[Algorithm, str]) -> 'SigningConfigBuilder':
        """
        Set signature algorithm, as a member or a wire name.

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            UnsupportedAlgorithmError: If the wire name is unknown
        """
        if not isinstance(algorithm, Algorithm):
            algorithm = Algorithm.from_name(algorithm)
        self._algorithm = algorithm
        return self

    def provider(self, provider: CryptoProvider) -> 'SigningConfigBuilder':
        """
        Pin a crypto provider.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._provider = provider
        return self

    def add_header_to_sign(self, header: str) -> 'SigningConfigBuilder':
        """
        Append a header to sign; repeated names are ignored.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        if header is None:
            raise ConfigurationError("Header to sign cannot be None", ErrorCodes.INVALID_CONFIG)

        if header not in self._headers_to_sign:
            self._headers_to_sign.append(header)
        return self

    def headers_to_sign(self, headers: Iterable[str]) -> 'SigningConfigBuilder':
        """
        Replace the list of headers to sign.

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._headers_to_sign = []
        for header in headers:
            self.add_header_to_sign(header)
        return self

    def build(self) -> SignerConfig:
        """
        Build the signer configuration.

        Returns:
            SignerConfig: Validated configuration

        Raises:
            ConfigurationError: If required fields are missing or the headers
                to sign are inconsistent
        """
        missing = [
            name for name, value in (
                ("keyId", self._key_id),
                ("keyMap", self._key_map),
                ("algorithm", self._algorithm),
            )
            if value is None
        ]
        if missing:
            raise ConfigurationError(
                "Missing required properties: " + " ".join(missing),
                ErrorCodes.MISSING_REQUIRED_FIELD,
                {"missing_properties": missing}
            )

        return SignerConfig(
            key_id=self._key_id,
            key_map=self._key_map,
            algorithm=self._algorithm,
            headers_to_sign=tuple(self._headers_to_sign),
            provider=self._provider
        )


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signer configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()
