"""
Utility functions for HTTP message signing

This module provides header-name normalization, base64 handling, request
target parsing, HTTP date formatting and key loading helpers.
"""

import base64
import binascii
import logging
import secrets
import time
from email.utils import formatdate
from functools import lru_cache
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from ..exceptions import ErrorCodes, InvalidKeyError
from .types import PrivateKey, PublicKey

logger = logging.getLogger(__name__)


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Trimmed, lowercase header name
    """
    return name.strip().lower()


def to_base64(data: bytes) -> str:
    """Encode bytes as standard base64 text."""
    return base64.b64encode(data).decode('ascii')


def from_base64(value: str) -> Optional[bytes]:
    """
    Decode standard base64 text.

    Args:
        value: Base64 string

    Returns:
        bytes or None: Decoded bytes, or None when the value is not valid base64
    """
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        return None


def split_request_target(uri: str) -> Tuple[str, Optional[str]]:
    """
    Split a request URI into its path and query.

    Absolute URLs are accepted; only their path and query are kept.

    Args:
        uri: Request target or absolute URL

    Returns:
        tuple: (path, query) where query is None when the URI has none
    """
    parts = urlsplit(uri)
    path = parts.path or "/"
    query = parts.query or None
    return path, query


def format_http_date(timestamp: Optional[float] = None) -> str:
    """
    Format a timestamp as an IMF-fixdate suitable for the Date header.

    Args:
        timestamp: Unix timestamp (uses current time if None)

    Returns:
        str: e.g. ``Sun, 05 Jan 2014 21:31:40 GMT``
    """
    if timestamp is None:
        timestamp = time.time()
    return formatdate(timestamp, usegmt=True)


@lru_cache(maxsize=None)
def strong_random_available() -> bool:
    """
    Check once whether the operating system provides a strong random source.

    The result is cached for the life of the process. Signing still works
    without it, using the cryptography backend's default randomness.

    Returns:
        bool: True if strong randomness is available
    """
    try:
        secrets.token_bytes(1)
        return True
    except NotImplementedError:
        logger.warning("No strong random source available, falling back to default randomness")
        return False


def load_private_key_pem(data: Union[str, bytes], password: Optional[bytes] = None) -> PrivateKey:
    """
    Load an RSA or EC private key from PEM data.

    Raises:
        InvalidKeyError: If the data is not a supported private key
    """
    if isinstance(data, str):
        data = data.encode('ascii')
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(
            f"Unable to load private key: {e}",
            ErrorCodes.INVALID_KEY
        ) from e
    return key


def load_public_key_pem(data: Union[str, bytes]) -> PublicKey:
    """
    Load an RSA or EC public key from PEM data.

    Raises:
        InvalidKeyError: If the data is not a supported public key
    """
    if isinstance(data, str):
        data = data.encode('ascii')
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKeyError(
            f"Unable to load public key: {e}",
            ErrorCodes.INVALID_KEY
        ) from e
    return key
