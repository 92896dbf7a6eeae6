"""
Signature header parsing and formatting

The ``Signature`` header carries comma separated ``name=value`` parameters:
``keyId``, ``algorithm``, ``headers`` and ``signature``. Values may be quoted.
Parameters may be spread over several header lines; when a parameter appears
more than once the last occurrence wins.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..exceptions import ErrorCodes, SignatureHeaderError
from .algorithms import Algorithm
from .types import (
    HEADER_DATE,
    PARAM_ALGORITHM,
    PARAM_HEADERS,
    PARAM_KEY_ID,
    PARAM_SIGNATURE,
)
from .utils import normalize_header_name

DEFAULT_SIGNED_HEADERS: Tuple[str, ...] = (normalize_header_name(HEADER_DATE),)

_SEPARATORS = ",;"


def parse_header_elements(header_value: str) -> List[Tuple[str, Optional[str]]]:
    """
    Split a header value into ``(name, value)`` elements.

    Elements are separated by commas or semicolons. A value is either a token
    running up to the next separator or a double-quoted string, in which
    separators are literal and a backslash escapes the next character.
    Elements without ``=`` have a value of None.

    Args:
        header_value: Raw header value

    Returns:
        list: Elements in the order they appear
    """
    elements = []
    i, n = 0, len(header_value)

    while i < n:
        start = i
        while i < n and header_value[i] not in "=" + _SEPARATORS:
            i += 1
        name = header_value[start:i].strip()
        value = None

        if i < n and header_value[i] == "=":
            i += 1
            while i < n and header_value[i] in " \t":
                i += 1

            if i < n and header_value[i] == '"':
                i += 1
                chars = []
                while i < n and header_value[i] != '"':
                    if header_value[i] == "\\" and i + 1 < n:
                        i += 1
                    chars.append(header_value[i])
                    i += 1
                value = "".join(chars)
                while i < n and header_value[i] not in _SEPARATORS:
                    i += 1
            else:
                start = i
                while i < n and header_value[i] not in _SEPARATORS:
                    i += 1
                value = header_value[start:i].strip()

        if name:
            elements.append((name, value))
        i += 1

    return elements


def parse_signed_headers(value: str) -> List[str]:
    """Split a ``headers`` parameter into normalized, de-duplicated names."""
    result: List[str] = []
    for header in value.split(" "):
        header = normalize_header_name(header)
        if header and header not in result:
            result.append(header)
    return result


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_param(name: str, value: str) -> str:
    """Format a single ``name="value"`` parameter."""
    return f"{name}={quote(value)}"


def format_signed_headers(headers: Iterable[str]) -> str:
    return " ".join(normalize_header_name(header) for header in headers)


@dataclass(frozen=True)
class SignatureHeaderElements:
    """
    Parsed content of the Signature header

    Attributes:
        key_id: Identifier of the key used to sign
        algorithm: Signature algorithm
        signed_headers: Normalized names of the signed headers, in order
        signature: Base64 encoded signature
    """
    key_id: str
    algorithm: Algorithm
    signed_headers: Tuple[str, ...]
    signature: str

    @classmethod
    def from_header_value(cls, header_value: str) -> 'SignatureHeaderElements':
        """
        Parse a single Signature header value.

        Raises:
            SignatureHeaderError: If a required parameter is missing
            UnsupportedAlgorithmError: If the algorithm is unknown
        """
        return _ElementsBuilder().parse(header_value).build()

    @classmethod
    def from_header_values(cls, header_values: Iterable[str]) -> 'SignatureHeaderElements':
        """
        Parse the values of every Signature header line of a message.

        Parameters accumulate across lines; the last occurrence of each wins.

        Raises:
            SignatureHeaderError: If a required parameter is missing
            UnsupportedAlgorithmError: If the algorithm is unknown
        """
        builder = _ElementsBuilder()
        for header_value in header_values:
            builder.parse(header_value)
        return builder.build()

    def to_params(self) -> List[str]:
        """
        Format each parameter separately, in ``keyId``, ``algorithm``,
        ``headers``, ``signature`` order.

        ``headers`` is left out when only the default ``date`` is signed.
        """
        params = [
            format_param(PARAM_KEY_ID, self.key_id),
            format_param(PARAM_ALGORITHM, self.algorithm.algorithm_name),
        ]
        if self.signed_headers != DEFAULT_SIGNED_HEADERS:
            params.append(format_param(PARAM_HEADERS, format_signed_headers(self.signed_headers)))
        params.append(format_param(PARAM_SIGNATURE, self.signature))
        return params

    def to_header_value(self) -> str:
        """Format the elements as one Signature header value."""
        return ",".join(self.to_params())


class _ElementsBuilder:
    """Accumulates parameters from one or more header values"""

    def __init__(self):
        self.key_id: Optional[str] = None
        self.algorithm: Optional[Algorithm] = None
        self.signed_headers: List[str] = []
        self.signature: Optional[str] = None

    def parse(self, header_value: str) -> '_ElementsBuilder':
        for name, value in parse_header_elements(header_value):
            if value is None:
                continue
            if name == PARAM_KEY_ID:
                self.key_id = value
            elif name == PARAM_ALGORITHM:
                self.algorithm = Algorithm.from_name(value)
            elif name == PARAM_HEADERS:
                self.signed_headers = parse_signed_headers(value)
            elif name == PARAM_SIGNATURE:
                self.signature = value
            # unknown parameters are ignored
        return self

    def build(self) -> SignatureHeaderElements:
        missing = [
            param for param, value in (
                (PARAM_KEY_ID, self.key_id),
                (PARAM_ALGORITHM, self.algorithm),
                (PARAM_SIGNATURE, self.signature),
            )
            if value is None
        ]
        if missing:
            raise SignatureHeaderError(
                "Missing required properties: " + " ".join(missing),
                ErrorCodes.MISSING_REQUIRED_PROPERTIES,
                {"missing_properties": missing}
            )

        return SignatureHeaderElements(
            key_id=self.key_id,
            algorithm=self.algorithm,
            signed_headers=tuple(self.signed_headers) or DEFAULT_SIGNED_HEADERS,
            signature=self.signature,
        )
