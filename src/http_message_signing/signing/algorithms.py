"""
Signature algorithm registry

This module enumerates the supported signing algorithms, maps each one to its
kind (public-key signature or secret-key MAC) and underlying primitive, and
builds the primitives through a crypto provider. The default provider is
backed by the ``cryptography`` package; another provider can be pinned to
route primitives elsewhere (an HSM, a FIPS build, ...).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Type

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from ..exceptions import ErrorCodes, InvalidKeyError, UnsupportedAlgorithmError
from .types import PrivateKey, PublicKey, SecretKey


class AlgorithmKind(str, Enum):
    """Kind of key an algorithm works with"""
    PUBLIC_KEY = "PublicKey"
    SECRET_KEY = "SecretKey"


@dataclass(frozen=True)
class AlgorithmSpec:
    """
    Static description of an algorithm

    Attributes:
        primitive_name: Identifier of the primitive a provider must supply
        kind: Public-key signature or secret-key MAC
    """
    primitive_name: str
    kind: AlgorithmKind


class Algorithm(str, Enum):
    """Supported HTTP message signature algorithms, by wire name"""
    # Public-key algorithms
    RSA_SHA1 = "rsa-sha1"
    RSA_SHA256 = "rsa-sha256"
    ECDSA_SHA256 = "ecdsa-sha256"
    # Secret-key algorithms
    HMAC_SHA256 = "hmac-sha256"

    @property
    def algorithm_name(self) -> str:
        """Name used in the ``algorithm`` parameter of the Signature header."""
        return self.value

    @property
    def primitive_name(self) -> str:
        return _ALGORITHM_SPECS[self].primitive_name

    @property
    def kind(self) -> AlgorithmKind:
        return _ALGORITHM_SPECS[self].kind

    @classmethod
    def from_name(cls, name: str) -> 'Algorithm':
        """
        Look up an algorithm by wire name.

        Args:
            name: Wire name, e.g. ``rsa-sha256``

        Returns:
            Algorithm: Matching algorithm

        Raises:
            UnsupportedAlgorithmError: If no algorithm has that name
        """
        for algorithm in cls:
            if algorithm.value == name:
                return algorithm

        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm '{name}'",
            ErrorCodes.UNSUPPORTED_ALGORITHM,
            {"algorithm": name, "supported_algorithms": [a.value for a in cls]}
        )

    def create_signature(self, provider: Optional['CryptoProvider'] = None) -> 'SignaturePrimitive':
        """
        Create the public-key signature primitive for this algorithm.

        Args:
            provider: Provider to take the primitive from (default provider if None)

        Raises:
            UnsupportedAlgorithmError: If this is not a public-key algorithm or
                the provider does not implement it
        """
        if self.kind is not AlgorithmKind.PUBLIC_KEY:
            raise UnsupportedAlgorithmError(
                f"Algorithm '{self.value}' is not a public-key signature algorithm",
                ErrorCodes.UNSUPPORTED_ALGORITHM,
                {"algorithm": self.value, "kind": self.kind.value}
            )
        return (provider or default_provider()).create_signature(self)

    def create_mac(self, provider: Optional['CryptoProvider'] = None) -> 'MacPrimitive':
        """
        Create the secret-key MAC primitive for this algorithm.

        Args:
            provider: Provider to take the primitive from (default provider if None)

        Raises:
            UnsupportedAlgorithmError: If this is not a secret-key algorithm or
                the provider does not implement it
        """
        if self.kind is not AlgorithmKind.SECRET_KEY:
            raise UnsupportedAlgorithmError(
                f"Algorithm '{self.value}' is not a secret-key MAC algorithm",
                ErrorCodes.UNSUPPORTED_ALGORITHM,
                {"algorithm": self.value, "kind": self.kind.value}
            )
        return (provider or default_provider()).create_mac(self)


_ALGORITHM_SPECS: Dict[Algorithm, AlgorithmSpec] = {
    Algorithm.RSA_SHA1: AlgorithmSpec("SHA1withRSA", AlgorithmKind.PUBLIC_KEY),
    Algorithm.RSA_SHA256: AlgorithmSpec("SHA256withRSA", AlgorithmKind.PUBLIC_KEY),
    Algorithm.ECDSA_SHA256: AlgorithmSpec("SHA256withECDSA", AlgorithmKind.PUBLIC_KEY),
    Algorithm.HMAC_SHA256: AlgorithmSpec("HmacSHA256", AlgorithmKind.SECRET_KEY),
}


class SignaturePrimitive(ABC):
    """Public-key signature primitive"""

    @abstractmethod
    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        """Sign ``data`` with ``private_key``."""

    @abstractmethod
    def verify(self, public_key: PublicKey, data: bytes, signature: bytes) -> bool:
        """Return True if ``signature`` is valid for ``data``; False on mismatch."""


class MacPrimitive(ABC):
    """Secret-key MAC primitive"""

    @abstractmethod
    def compute(self, secret: SecretKey, data: bytes) -> bytes:
        """Compute the MAC of ``data``."""

    @abstractmethod
    def verify(self, secret: SecretKey, data: bytes, mac: bytes) -> bool:
        """Return True if ``mac`` matches, compared in constant time."""


class CryptoProvider(ABC):
    """Source of signature and MAC primitives"""

    name: str = "abstract"

    @abstractmethod
    def create_signature(self, algorithm: Algorithm) -> SignaturePrimitive:
        """Return a signature primitive for ``algorithm``."""

    @abstractmethod
    def create_mac(self, algorithm: Algorithm) -> MacPrimitive:
        """Return a MAC primitive for ``algorithm``."""


def _require_key(key, expected_types: tuple, algorithm_name: str, role: str):
    if not isinstance(key, expected_types):
        raise InvalidKeyError(
            f"Invalid {role} key for algorithm '{algorithm_name}': {type(key).__name__}",
            ErrorCodes.INVALID_KEY,
            {"algorithm": algorithm_name, "key_type": type(key).__name__}
        )
    return key


class RsaPkcs1v15Signature(SignaturePrimitive):
    """RSASSA-PKCS1-v1_5 signature"""

    def __init__(self, hash_algorithm: Type[hashes.HashAlgorithm], name: str):
        self.hash_algorithm = hash_algorithm
        self.name = name

    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        key = _require_key(private_key, (RSAPrivateKey,), self.name, "private")
        return key.sign(data, padding.PKCS1v15(), self.hash_algorithm())

    def verify(self, public_key: PublicKey, data: bytes, signature: bytes) -> bool:
        key = _require_key(public_key, (RSAPublicKey,), self.name, "public")
        try:
            key.verify(signature, data, padding.PKCS1v15(), self.hash_algorithm())
            return True
        except InvalidSignature:
            return False


class EcdsaSignature(SignaturePrimitive):
    """ECDSA signature, DER encoded"""

    def __init__(self, hash_algorithm: Type[hashes.HashAlgorithm], name: str):
        self.hash_algorithm = hash_algorithm
        self.name = name

    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        key = _require_key(private_key, (EllipticCurvePrivateKey,), self.name, "private")
        return key.sign(data, ec.ECDSA(self.hash_algorithm()))

    def verify(self, public_key: PublicKey, data: bytes, signature: bytes) -> bool:
        key = _require_key(public_key, (EllipticCurvePublicKey,), self.name, "public")
        try:
            key.verify(signature, data, ec.ECDSA(self.hash_algorithm()))
            return True
        except InvalidSignature:
            return False


class HmacPrimitive(MacPrimitive):
    """HMAC over a hash function"""

    def __init__(self, hash_algorithm: Type[hashes.HashAlgorithm], name: str):
        self.hash_algorithm = hash_algorithm
        self.name = name

    def _hmac(self, secret: SecretKey) -> hmac.HMAC:
        key = _require_key(secret, (bytes, bytearray, memoryview), self.name, "secret")
        return hmac.HMAC(bytes(key), self.hash_algorithm())

    def compute(self, secret: SecretKey, data: bytes) -> bytes:
        h = self._hmac(secret)
        h.update(data)
        return h.finalize()

    def verify(self, secret: SecretKey, data: bytes, mac: bytes) -> bool:
        h = self._hmac(secret)
        h.update(data)
        try:
            h.verify(mac)
            return True
        except InvalidSignature:
            return False


class CryptographyProvider(CryptoProvider):
    """Provider backed by the ``cryptography`` package"""

    name = "cryptography"

    _SIGNATURES: Dict[str, Callable[[], SignaturePrimitive]] = {
        "SHA1withRSA": lambda: RsaPkcs1v15Signature(hashes.SHA1, "SHA1withRSA"),
        "SHA256withRSA": lambda: RsaPkcs1v15Signature(hashes.SHA256, "SHA256withRSA"),
        "SHA256withECDSA": lambda: EcdsaSignature(hashes.SHA256, "SHA256withECDSA"),
    }

    _MACS: Dict[str, Callable[[], MacPrimitive]] = {
        "HmacSHA256": lambda: HmacPrimitive(hashes.SHA256, "HmacSHA256"),
    }

    def create_signature(self, algorithm: Algorithm) -> SignaturePrimitive:
        factory = self._SIGNATURES.get(algorithm.primitive_name)
        if factory is None:
            raise UnsupportedAlgorithmError(
                f"Provider '{self.name}' does not support '{algorithm.primitive_name}'",
                ErrorCodes.UNSUPPORTED_ALGORITHM,
                {"algorithm": algorithm.value, "provider": self.name}
            )
        return factory()

    def create_mac(self, algorithm: Algorithm) -> MacPrimitive:
        factory = self._MACS.get(algorithm.primitive_name)
        if factory is None:
            raise UnsupportedAlgorithmError(
                f"Provider '{self.name}' does not support '{algorithm.primitive_name}'",
                ErrorCodes.UNSUPPORTED_ALGORITHM,
                {"algorithm": algorithm.value, "provider": self.name}
            )
        return factory()


_DEFAULT_PROVIDER = CryptographyProvider()


def default_provider() -> CryptoProvider:
    """Return the process-wide default provider."""
    return _DEFAULT_PROVIDER
