"""
Signing string construction

The signing string is the canonical text that is signed by the signer and
rebuilt by the verifier. It is made of one ``name: value`` line per signed
header, in the order the headers are listed, joined with newlines.
"""

from typing import Iterable, List, Sequence, Tuple

from ..exceptions import CanonicalizationError, ErrorCodes
from .types import (
    HEADER_DATE,
    REQUEST_TARGET,
    RESPONSE_STATUS,
    HttpMessage,
    HttpRequest,
    HttpResponse,
)
from .utils import normalize_header_name, split_request_target


PSEUDO_HEADERS = (REQUEST_TARGET, RESPONSE_STATUS)


def dedupe_headers(headers: Iterable[str]) -> List[str]:
    """
    Remove case-insensitive duplicates, keeping the first occurrence.

    Args:
        headers: Header names

    Returns:
        list: Header names in their original spelling and order
    """
    seen = set()
    result = []
    for header in headers:
        key = normalize_header_name(header)
        if key not in seen:
            seen.add(key)
            result.append(header)
    return result


def is_pseudo_header(name: str) -> bool:
    return normalize_header_name(name) in PSEUDO_HEADERS


def header_line(name: str, values: Sequence[str]) -> str:
    """
    Format one signing string line.

    Every value is trimmed; multiple values are joined with ``", "`` in the
    order they appear in the message.
    """
    return normalize_header_name(name) + ": " + ", ".join(value.strip() for value in values)


class SigningStringBuilder:
    """
    Builds the signing string of a message for a fixed list of headers

    An empty list selects the default mode, where only the ``Date`` header
    is signed.
    """

    def __init__(self, headers_to_sign: Iterable[str] = ()):
        self.headers_to_sign: Tuple[str, ...] = tuple(dedupe_headers(headers_to_sign))

    @classmethod
    def no_header(cls) -> 'SigningStringBuilder':
        return cls(())

    @classmethod
    def for_headers(cls, headers_to_sign: Iterable[str]) -> 'SigningStringBuilder':
        return cls(headers_to_sign)

    def signing_string(self, message: HttpMessage) -> str:
        """
        Build the signing string for a message.

        Args:
            message: Request or response to canonicalize

        Returns:
            str: Lines joined with ``\\n``, without a trailing newline

        Raises:
            CanonicalizationError: If a listed header is missing, a pseudo-header
                does not fit the message, or ``Date`` is missing in default mode
        """
        self._check_headers(message)

        if not self.headers_to_sign:
            return header_line(HEADER_DATE, message.header_values(HEADER_DATE))

        return "\n".join(self._line(message, header) for header in self.headers_to_sign)

    def _check_headers(self, message: HttpMessage) -> None:
        if not self.headers_to_sign:
            if not message.header_values(HEADER_DATE):
                raise CanonicalizationError(
                    "A HTTP message must contain at least a date header to be signed",
                    ErrorCodes.MISSING_DATE_HEADER
                )
            return

        missing = [
            header for header in self.headers_to_sign
            if not is_pseudo_header(header) and not message.header_values(header.strip())
        ]
        if missing:
            raise CanonicalizationError(
                "The following headers cannot be found in the message: "
                + ", ".join(f"'{header}'" for header in missing),
                ErrorCodes.MISSING_HEADERS,
                {"missing_headers": missing}
            )

    def _line(self, message: HttpMessage, header: str) -> str:
        name = normalize_header_name(header)

        if name == REQUEST_TARGET:
            if not isinstance(message, HttpRequest):
                raise CanonicalizationError(
                    f"Header '{REQUEST_TARGET}' can only be used with HTTP Request.",
                    ErrorCodes.INVALID_MESSAGE_ROLE,
                    {"header": REQUEST_TARGET}
                )
            return request_target_line(message)

        if name == RESPONSE_STATUS:
            if not isinstance(message, HttpResponse):
                raise CanonicalizationError(
                    f"Header '{RESPONSE_STATUS}' can only be used with HTTP Response.",
                    ErrorCodes.INVALID_MESSAGE_ROLE,
                    {"header": RESPONSE_STATUS}
                )
            return header_line(RESPONSE_STATUS, [str(message.status_code)])

        return header_line(name, message.header_values(name))


def request_target_line(request: HttpRequest) -> str:
    """Format the ``(request-target)`` line: lowercased method, path and query."""
    path, query = split_request_target(request.uri)
    target = path if query is None else f"{path}?{query}"
    return header_line(REQUEST_TARGET, [f"{request.method.lower()} {target}"])


def build_signing_string(headers_to_sign: Iterable[str], message: HttpMessage) -> str:
    """
    Build the signing string for ``message``.

    Args:
        headers_to_sign: Ordered header names; empty for date-only mode
        message: Request or response

    Returns:
        str: Signing string
    """
    return SigningStringBuilder(headers_to_sign).signing_string(message)
