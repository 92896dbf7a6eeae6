"""
HTTP client integration for message signing

This module adapts ``requests`` objects to the message interfaces used by the
signer and the verifier, and provides an auth handler and a session wrapper
that sign outgoing requests automatically.
"""

import logging
from typing import List, Optional

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from .signer import HttpMessageSigner
from .signing_config import SignerConfig
from .types import HEADER_DATE, HttpRequest, HttpResponse
from .utils import format_http_date

logger = logging.getLogger(__name__)


class _RequestsHeaders:
    """
    Header access over a ``requests`` CaseInsensitiveDict

    The dict holds one value per name, so a repeated header is stored as its
    values joined with ``", "``, which is how it is read back for signing.
    """

    def __init__(self, headers):
        self._headers = headers

    def header_values(self, name: str) -> List[str]:
        value = self._headers.get(name.strip())
        if value is None:
            return []
        if isinstance(value, bytes):
            value = value.decode('latin-1')
        return [value]

    def add_header(self, name: str, value: str) -> None:
        existing = self._headers.get(name)
        if existing is None:
            self._headers[name] = value
        else:
            self._headers[name] = f"{existing}, {value}"


class PreparedRequestMessage(_RequestsHeaders, HttpRequest):
    """Adapts a ``requests.PreparedRequest`` for signing and verification"""

    def __init__(self, prepared: PreparedRequest):
        super().__init__(prepared.headers)
        self.prepared = prepared

    @property
    def method(self) -> str:
        return self.prepared.method

    @property
    def uri(self) -> str:
        return self.prepared.url

    def __repr__(self) -> str:
        return f"PreparedRequestMessage({self.method} {self.uri})"


class ResponseMessage(_RequestsHeaders, HttpResponse):
    """Adapts a ``requests.Response`` for signing and verification"""

    def __init__(self, response: requests.Response):
        super().__init__(response.headers)
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def __repr__(self) -> str:
        return f"ResponseMessage({self.status_code} {self.response.url})"


class HttpSignatureAuth(AuthBase):
    """
    ``requests`` auth handler that signs each prepared request

    Usage:
        requests.get(url, auth=HttpSignatureAuth(signer))
    """

    def __init__(self, signer: HttpMessageSigner, add_date: bool = True):
        """
        Args:
            signer: Signer applied to every request
            add_date: Set a ``Date`` header on requests that have none
        """
        self.signer = signer
        self.add_date = add_date

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        if self.add_date and HEADER_DATE not in request.headers:
            request.headers[HEADER_DATE] = format_http_date()

        self.signer.sign(PreparedRequestMessage(request))
        logger.debug(f"Signed {request.method} request to {request.url}")
        return request


class SigningSession:
    """
    HTTP session wrapper with automatic request signing capability.

    This class wraps a requests.Session and signs outgoing requests with the
    configured signer while signing is enabled.
    """

    def __init__(
        self,
        signer: Optional[HttpMessageSigner] = None,
        session: Optional[Session] = None,
        auto_sign: bool = True,
        add_date: bool = True
    ):
        """
        Initialize signing session.

        Args:
            signer: Optional signer; requests go out unsigned without one
            session: Optional existing requests session to wrap
            auto_sign: Whether to automatically sign requests
            add_date: Set a ``Date`` header on requests that have none
        """
        self.session = session or requests.Session()
        self.signer = signer
        self.auto_sign = auto_sign
        self.add_date = add_date

    def configure_signing(self, config: SignerConfig, auto_sign: bool = True) -> None:
        """
        Configure request signing for this session.

        Args:
            config: Signer configuration
            auto_sign: Whether to automatically sign requests
        """
        self.signer = HttpMessageSigner(config)
        self.auto_sign = auto_sign
        logger.info(f"Configured request signing for key ID: {config.key_id}")

    def disable_signing(self) -> None:
        """Disable automatic request signing."""
        self.auto_sign = False
        logger.info("Disabled automatic request signing")

    def enable_signing(self) -> None:
        """Enable automatic request signing (if configured)."""
        if self.signer:
            self.auto_sign = True
            logger.info("Enabled automatic request signing")
        else:
            logger.warning("Cannot enable signing - no signer configured")

    @property
    def signing_enabled(self) -> bool:
        return self.auto_sign and self.signer is not None

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make HTTP request, signed when signing is enabled.

        Signing errors propagate; an unsigned request is never sent in place
        of a signed one.
        """
        if self.signing_enabled:
            kwargs['auth'] = HttpSignatureAuth(self.signer, add_date=self.add_date)
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> 'SigningSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create_signing_session(
    config: Optional[SignerConfig] = None,
    session: Optional[Session] = None,
    auto_sign: bool = True
) -> SigningSession:
    """
    Create a session that signs its requests.

    Args:
        config: Optional signer configuration
        session: Optional existing requests session to wrap
        auto_sign: Whether to automatically sign requests

    Returns:
        SigningSession: Session wrapper
    """
    signer = HttpMessageSigner(config) if config else None
    return SigningSession(signer=signer, session=session, auto_sign=auto_sign)


def verify_response(verifier, response: requests.Response) -> bool:
    """
    Verify the signature of a ``requests`` response.

    Args:
        verifier: HttpMessageSignatureVerifier to use
        response: Signed response

    Returns:
        bool: True if the signature matches
    """
    return verifier.verify(ResponseMessage(response))
