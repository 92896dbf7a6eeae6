"""
Type definitions for HTTP message signing

This module defines the minimal message abstraction the signer and verifier
consume, the key map contract used to resolve key identifiers, and simple
in-memory implementations of both.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey


# Pseudo-headers
REQUEST_TARGET = "(request-target)"
RESPONSE_STATUS = "(response-status)"

HEADER_SIGNATURE = "Signature"
HEADER_DATE = "Date"

# Signature header parameters
PARAM_KEY_ID = "keyId"
PARAM_ALGORITHM = "algorithm"
PARAM_HEADERS = "headers"
PARAM_SIGNATURE = "signature"


PublicKey = Union[RSAPublicKey, EllipticCurvePublicKey]
PrivateKey = Union[RSAPrivateKey, EllipticCurvePrivateKey]
SecretKey = bytes
HeaderItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class HttpMessage(ABC):
    """
    An HTTP message that can be signed or verified.

    Header lookup is case-insensitive and returns values in the order they
    appear in the message.
    """

    @abstractmethod
    def header_values(self, name: str) -> List[str]:
        """Return all values of the header ``name``, or an empty list."""

    @abstractmethod
    def add_header(self, name: str, value: str) -> None:
        """Append a header to the message without replacing existing ones."""


class HttpRequest(HttpMessage):
    """An HTTP request: a message with a method and a target URI"""

    @property
    @abstractmethod
    def method(self) -> str:
        """The request method, e.g. ``GET``."""

    @property
    @abstractmethod
    def uri(self) -> str:
        """The request target: a path with an optional query, or an absolute URI."""


class HttpResponse(HttpMessage):
    """An HTTP response: a message with a status code"""

    @property
    @abstractmethod
    def status_code(self) -> int:
        """The numeric status code of the response."""


def _header_pairs(headers: Optional[HeaderItems]) -> List[Tuple[str, str]]:
    if headers is None:
        return []
    if isinstance(headers, Mapping):
        return [(name, value) for name, value in headers.items()]
    return [(name, value) for name, value in headers]


class _HeaderList:
    """Ordered multi-valued header storage shared by the in-memory messages"""

    def __init__(self, headers: Optional[HeaderItems] = None):
        self.headers: List[Tuple[str, str]] = _header_pairs(headers)

    def header_values(self, name: str) -> List[str]:
        wanted = name.lower()
        return [value for header_name, value in self.headers if header_name.lower() == wanted]

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))


class Request(_HeaderList, HttpRequest):
    """
    In-memory HTTP request

    Attributes:
        method: HTTP method (GET, POST, etc.)
        uri: Request target, either ``/path?query`` or an absolute URL
        headers: Headers as a mapping or as (name, value) pairs; repeated
            names are kept in order
    """

    def __init__(self, method: str, uri: str, headers: Optional[HeaderItems] = None):
        if not method:
            raise ValueError("Request method cannot be empty")

        if not uri:
            raise ValueError("Request URI cannot be empty")

        super().__init__(headers)
        self._method = method
        self._uri = uri

    @property
    def method(self) -> str:
        return self._method

    @property
    def uri(self) -> str:
        return self._uri

    def __repr__(self) -> str:
        return f"Request(method='{self._method}', uri='{self._uri}', headers={self.headers})"


class Response(_HeaderList, HttpResponse):
    """
    In-memory HTTP response

    Attributes:
        status_code: Numeric HTTP status code
        headers: Headers as a mapping or as (name, value) pairs
    """

    def __init__(self, status_code: int, headers: Optional[HeaderItems] = None):
        if not isinstance(status_code, int) or status_code < 100 or status_code >= 600:
            raise ValueError("Status must be a valid HTTP status code")

        super().__init__(headers)
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        return self._status_code

    def __repr__(self) -> str:
        return f"Response(status_code={self._status_code}, headers={self.headers})"


class KeyMap(ABC):
    """
    Resolves key identifiers to key material.

    Each lookup returns ``None`` when no key of that kind is associated with
    the identifier.
    """

    @abstractmethod
    def get_public_key(self, key_id: str) -> Optional[PublicKey]:
        """Return the public key for ``key_id``."""

    @abstractmethod
    def get_private_key(self, key_id: str) -> Optional[PrivateKey]:
        """Return the private key for ``key_id``."""

    @abstractmethod
    def get_secret_key(self, key_id: str) -> Optional[SecretKey]:
        """Return the shared secret for ``key_id``."""


class DictKeyMap(KeyMap):
    """Key map backed by plain dictionaries"""

    def __init__(
        self,
        public_keys: Optional[Dict[str, PublicKey]] = None,
        private_keys: Optional[Dict[str, PrivateKey]] = None,
        secret_keys: Optional[Dict[str, SecretKey]] = None
    ):
        self.public_keys: Dict[str, PublicKey] = dict(public_keys or {})
        self.private_keys: Dict[str, PrivateKey] = dict(private_keys or {})
        self.secret_keys: Dict[str, SecretKey] = dict(secret_keys or {})

    def add_key_pair(self, key_id: str, private_key: PrivateKey) -> 'DictKeyMap':
        """
        Register a private key and its public half under one identifier.

        Returns:
            DictKeyMap: Self for method chaining
        """
        self.private_keys[key_id] = private_key
        self.public_keys[key_id] = private_key.public_key()
        return self

    def add_secret_key(self, key_id: str, secret: SecretKey) -> 'DictKeyMap':
        """
        Register a shared secret.

        Returns:
            DictKeyMap: Self for method chaining
        """
        self.secret_keys[key_id] = bytes(secret)
        return self

    def get_public_key(self, key_id: str) -> Optional[PublicKey]:
        return self.public_keys.get(key_id)

    def get_private_key(self, key_id: str) -> Optional[PrivateKey]:
        return self.private_keys.get(key_id)

    def get_secret_key(self, key_id: str) -> Optional[SecretKey]:
        return self.secret_keys.get(key_id)
