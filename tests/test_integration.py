"""
Test suite for the requests integration
"""

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from unittest.mock import Mock

from http_message_signing.signing import (
    HttpMessageSigner,
    HttpSignatureAuth,
    PreparedRequestMessage,
    ResponseMessage,
    SignatureHeaderElements,
    SigningSession,
    create_signing_config,
    create_signing_session,
    verify_response,
)
from http_message_signing.verification import create_verifier

from conftest import (
    BASIC_HEADERS,
    HMAC_KEY_ID,
    RFC_DATE,
    RFC_KEY_ID,
    SIGNATURE_BASIC,
    attach_hmac_signature,
)

RFC_URL = "http://example.com/foo?param=value&pet=dog"


@pytest.fixture
def basic_config(rfc_key_map):
    return (create_signing_config()
            .key_id(RFC_KEY_ID)
            .key_map(rfc_key_map)
            .algorithm("rsa-sha256")
            .headers_to_sign(BASIC_HEADERS)
            .build())


def prepare(method="POST", url=RFC_URL, headers=None, **kwargs):
    if headers is None:
        headers = {"Host": "example.com", "Date": RFC_DATE}
    return requests.Request(method, url, headers=headers, **kwargs).prepare()


class TestPreparedRequestMessage:
    """Test the PreparedRequest adapter"""

    def test_method_and_uri(self):
        message = PreparedRequestMessage(prepare())
        assert message.method == "POST"
        assert message.uri == RFC_URL

    def test_header_lookup_is_case_insensitive(self):
        message = PreparedRequestMessage(prepare())
        assert message.header_values("HOST") == ["example.com"]
        assert message.header_values("x-missing") == []

    def test_repeated_header_values_are_joined(self):
        prepared = prepare()
        message = PreparedRequestMessage(prepared)
        message.add_header("X-Trace", "a")
        message.add_header("X-Trace", "b")
        assert prepared.headers["X-Trace"] == "a, b"


class TestHttpSignatureAuth:
    """Test signing through requests auth"""

    def test_rfc_basic_signature(self, basic_config):
        prepared = HttpSignatureAuth(HttpMessageSigner(basic_config), add_date=False)(prepare())

        elements = SignatureHeaderElements.from_header_value(prepared.headers["Signature"])
        assert elements.key_id == RFC_KEY_ID
        assert elements.signed_headers == tuple(BASIC_HEADERS)
        assert elements.signature == SIGNATURE_BASIC

    def test_signed_request_verifies(self, basic_config, rfc_key_map):
        prepared = HttpSignatureAuth(HttpMessageSigner(basic_config))(prepare())
        assert create_verifier(rfc_key_map).verify(PreparedRequestMessage(prepared))

    def test_date_added_when_missing(self, basic_config, rfc_key_map):
        prepared = HttpSignatureAuth(HttpMessageSigner(basic_config))(prepare(headers={"Host": "example.com"}))

        assert prepared.headers["Date"].endswith("GMT")
        assert create_verifier(rfc_key_map).verify(PreparedRequestMessage(prepared))

    def test_existing_date_is_kept(self, basic_config):
        prepared = HttpSignatureAuth(HttpMessageSigner(basic_config))(prepare())
        assert prepared.headers["Date"] == RFC_DATE

    def test_body_headers_can_be_signed(self, key_map):
        config = (create_signing_config()
                  .key_id(HMAC_KEY_ID)
                  .key_map(key_map)
                  .algorithm("hmac-sha256")
                  .headers_to_sign(["(request-target)", "date", "content-type", "content-length"])
                  .build())
        prepared = HttpSignatureAuth(HttpMessageSigner(config))(
            prepare(json={"hello": "world"}, headers={"Date": RFC_DATE})
        )

        assert create_verifier(key_map).verify(PreparedRequestMessage(prepared))


class TestSigningSession:
    """Test the session wrapper"""

    def test_requests_carry_signing_auth(self, basic_config):
        inner = Mock(spec=requests.Session)
        session = create_signing_session(basic_config, session=inner)

        session.get("http://example.com/foo")

        _, kwargs = inner.request.call_args
        assert isinstance(kwargs["auth"], HttpSignatureAuth)
        assert inner.request.call_args[0] == ("GET", "http://example.com/foo")

    def test_disabled_signing(self, basic_config):
        inner = Mock(spec=requests.Session)
        session = create_signing_session(basic_config, session=inner)
        session.disable_signing()

        session.post("http://example.com/foo", data="x")

        _, kwargs = inner.request.call_args
        assert "auth" not in kwargs

    def test_enable_without_signer(self):
        session = SigningSession(session=Mock(spec=requests.Session), auto_sign=False)
        session.enable_signing()
        assert not session.signing_enabled

    def test_configure_signing(self, basic_config):
        session = SigningSession(session=Mock(spec=requests.Session))
        session.configure_signing(basic_config)

        assert session.signing_enabled
        assert session.signer.key_id == RFC_KEY_ID

    def test_context_manager_closes_session(self, basic_config):
        inner = Mock(spec=requests.Session)
        with create_signing_session(basic_config, session=inner):
            pass
        inner.close.assert_called_once()


class TestResponseVerification:
    """Test the Response adapter"""

    def _response(self, status_code=200, headers=None):
        response = requests.Response()
        response.status_code = status_code
        response.url = RFC_URL
        response.headers = CaseInsensitiveDict(headers or {"Date": RFC_DATE, "Content-Type": "text/plain"})
        return response

    def test_date_signed_response_verifies(self, key_map):
        config = (create_signing_config()
                  .key_id(HMAC_KEY_ID)
                  .key_map(key_map)
                  .algorithm("hmac-sha256")
                  .build())
        response = self._response()
        HttpMessageSigner(config).sign(ResponseMessage(response))

        assert response.headers["Signature"].startswith(f'keyId="{HMAC_KEY_ID}", ')
        assert verify_response(create_verifier(key_map), response)

    def test_status_signed_response_verifies(self, key_map, hmac_secret):
        response = self._response()
        attach_hmac_signature(ResponseMessage(response), HMAC_KEY_ID, hmac_secret,
                              ["(response-status)", "date", "content-type"])

        assert verify_response(create_verifier(key_map), response)

    def test_status_change_fails_verification(self, key_map, hmac_secret):
        response = self._response()
        attach_hmac_signature(ResponseMessage(response), HMAC_KEY_ID, hmac_secret, ["(response-status)", "date"])
        response.status_code = 500

        assert not verify_response(create_verifier(key_map), response)
