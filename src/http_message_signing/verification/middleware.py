"""
Verification middleware for WSGI applications

``SignatureVerificationMiddleware`` wraps a WSGI application and lets through
only requests whose signature verifies; every other request is answered with
``401 Unauthorized``.
"""

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import quote

from ..signing.types import HttpRequest
from .types import VerificationError
from .verifier import HttpMessageSignatureVerifier

logger = logging.getLogger(__name__)

# WSGI keeps these two headers outside the HTTP_ namespace
_UNPREFIXED_HEADERS = ("CONTENT_TYPE", "CONTENT_LENGTH")

_PATH_SAFE = "/!$&'()*+,;=:@"

VERIFIED_ENVIRON_KEY = "http_message_signing.verified"


class WsgiRequestMessage(HttpRequest):
    """Read-only request view over a WSGI environ"""

    def __init__(self, environ: Dict[str, Any]):
        self.environ = environ

    @property
    def method(self) -> str:
        return self.environ.get("REQUEST_METHOD", "GET")

    @property
    def uri(self) -> str:
        raw_uri = self.environ.get("RAW_URI") or self.environ.get("REQUEST_URI")
        if raw_uri:
            return raw_uri

        # PATH_INFO arrives percent-decoded as a latin-1 string
        path = self.environ.get("SCRIPT_NAME", "") + self.environ.get("PATH_INFO", "")
        path = quote(path.encode("latin-1"), safe=_PATH_SAFE)
        query = self.environ.get("QUERY_STRING")
        if query:
            return f"{path or '/'}?{query}"
        return path or "/"

    def header_values(self, name: str) -> List[str]:
        key = name.strip().upper().replace("-", "_")
        if key not in _UNPREFIXED_HEADERS:
            key = "HTTP_" + key
        value = self.environ.get(key)
        if value is None:
            return []
        return [value]

    def add_header(self, name: str, value: str) -> None:
        raise NotImplementedError("WSGI request headers are read-only")

    def __repr__(self) -> str:
        return f"WsgiRequestMessage({self.method} {self.uri})"


class SignatureVerificationMiddleware:
    """
    WSGI middleware verifying request signatures

    A request is forwarded to the wrapped application only when its signature
    verifies. Requests with a wrong signature or that cannot be verified get a
    JSON ``401`` response. A key that does not fit its algorithm, or a
    provider lacking it, is a server side problem and propagates.
    """

    def __init__(
        self,
        app: Callable,
        verifier: HttpMessageSignatureVerifier,
        exempt_paths: Optional[Iterable[str]] = None
    ):
        """
        Args:
            app: Wrapped WSGI application
            verifier: Verifier applied to incoming requests
            exempt_paths: Paths passed through without verification
        """
        self.app = app
        self.verifier = verifier
        self.exempt_paths = frozenset(exempt_paths or ())

    def __call__(self, environ: Dict[str, Any], start_response: Callable) -> Iterable[bytes]:
        if environ.get("PATH_INFO", "") in self.exempt_paths:
            return self.app(environ, start_response)

        request = WsgiRequestMessage(environ)
        try:
            valid = self.verifier.verify(request)
        except VerificationError as e:
            logger.warning(f"Rejected unverifiable request {request.method} {request.uri}: {e}")
            return self._unauthorized(start_response, "Unable to verify signature", "UNVERIFIABLE_SIGNATURE")

        if not valid:
            logger.warning(f"Rejected request with invalid signature {request.method} {request.uri}")
            return self._unauthorized(start_response, "Signature verification failed", "INVALID_SIGNATURE")

        environ[VERIFIED_ENVIRON_KEY] = True
        return self.app(environ, start_response)

    def _unauthorized(self, start_response: Callable, error: str, code: str) -> List[bytes]:
        body = json.dumps({"error": error, "code": code}).encode("utf-8")
        start_response("401 Unauthorized", [
            ("Content-Type", "application/json"),
            ("Content-Length", str(len(body))),
        ])
        return [body]


def create_verification_middleware(
    app: Callable,
    verifier: HttpMessageSignatureVerifier,
    exempt_paths: Optional[Iterable[str]] = None
) -> SignatureVerificationMiddleware:
    """
    Wrap a WSGI application with signature verification.

    Returns:
        SignatureVerificationMiddleware: Wrapped application
    """
    return SignatureVerificationMiddleware(app, verifier, exempt_paths)
