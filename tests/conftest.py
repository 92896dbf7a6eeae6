"""
Shared fixtures: the RSA test key and request of the HTTP Signatures draft,
generated EC keys and an HMAC secret.
"""

import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)

from http_message_signing.signing import (
    Algorithm,
    DictKeyMap,
    Request,
    SignatureHeaderElements,
    SigningStringBuilder,
)


RFC_KEY_ID = "Test"

RFC_PUBLIC_KEY = (
    "MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQDCFENGw33yGihy92pDjZQhl0C36rPJj+CvfSC8"
    "+q28hxA161QFNUd13wuCTUcq0Qd2qsBe/2hFyc2DCJJg0h1L78+6Z4UMR7EOcpfdUE9Hf3m/hs+F"
    "UR45uBJeDK1HSFHD8bHKD6kv8FPGfJTotc+2xjJwoYi+1hqp1fIekaxsyQIDAQAB"
)

RFC_PRIVATE_KEY = (
    "MIICeAIBADANBgkqhkiG9w0BAQEFAASCAmIwggJeAgEAAoGBAMIUQ0bDffIaKHL3akONlCGXQLfq"
    "s8mP4K99ILz6rbyHEDXrVAU1R3XfC4JNRyrRB3aqwF7/aEXJzYMIkmDSHUvvz7pnhQxHsQ5yl91Q"
    "T0d/eb+Gz4VRHjm4El4MrUdIUcPxscoPqS/wU8Z8lOi1z7bGMnChiL7WGqnV8h6RrGzJAgMBAAEC"
    "gYEAlHxmQJS/HmTO/6612XtPkyeit1PVO+hdckZcrtln5S68w1QJ03ZA9ziwGIBBa8vDVxIq3kOw"
    "pnxQROlg/Lyk9iecMTPZ0NiJp7D37ESm5vJ5bagfhnHvXCoG04qSrCtdr+nN2mK5xFGOTq8Tphjs"
    "QEGz+Du5qdWkaJs5UASyofUCQQDsOSNUfbxYNSB/Weq9+fYqPoJPuchwTeMYmxlnvOVmYGYcUM40"
    "wtStdH9mbelHmbS0KYGprlEr3m7jXaO3V08jAkEA0lPe/ymeS2HjxtCj98p6Xq4RjJuhG0Dn+4e4"
    "eRnoVAXs5SQaiByZImW451zm3qEjVWwufRBkSNBkwQ5av7ApIwJBAILiRckSwcC97vug/oe0b8iI"
    "SfuSnJRdE28WwMTRzOkkkG8v9pEVQnG5Er3WOGMLrywDs2wowaDk5dvkjkmPfrECQQCAhPtoU5gE"
    "XAaBABCRY0ou/JKApsBlFN4sFpykcy5B2XUN92e28DKqkBnSVjREqZYbpoUpqpB85coLJahSJWSd"
    "AkBeuWDJIVyL/a54qUgTVCoiItJnxXw6WkUtGdvWnMjtTXJBedMAQVgznrTImXNSk5vVXhxJwZ3f"
    "rm2JIy/Es69M"
)

RFC_DATE = "Sun, 05 Jan 2014 21:31:40 GMT"

SIGNING_STRING_DEFAULT = "date: Sun, 05 Jan 2014 21:31:40 GMT"

SIGNING_STRING_BASIC = (
    "(request-target): post /foo?param=value&pet=dog\n"
    "host: example.com\n"
    "date: Sun, 05 Jan 2014 21:31:40 GMT"
)

SIGNING_STRING_ALL_HEADERS = (
    "(request-target): post /foo?param=value&pet=dog\n"
    "host: example.com\n"
    "date: Sun, 05 Jan 2014 21:31:40 GMT\n"
    "content-type: application/json\n"
    "digest: SHA-256=X48E9qOokqqrvdts8nOJRJN3OWDUoyWxBf7kbu9DBPE=\n"
    "content-length: 18"
)

BASIC_HEADERS = ["(request-target)", "host", "date"]
ALL_HEADERS = ["(request-target)", "host", "date", "content-type", "digest", "content-length"]

SIGNATURE_DEFAULT = (
    "SjWJWbWN7i0wzBvtPl8rbASWz5xQW6mcJmn+ibttBqtifLN7Sazz"
    "6m79cNfwwb8DMJ5cou1s7uEGKKCs+FLEEaDV5lp7q25WqS+lavg7T8hc0GppauB"
    "6hbgEKTwblDHYGEtbGmtdHgVCk9SuS13F0hZ8FD0k/5OxEPXe5WozsbM="
)

SIGNATURE_BASIC = (
    "qdx+H7PHHDZgy4"
    "y/Ahn9Tny9V3GP6YgBPyUXMmoxWtLbHpUnXS2mg2+SbrQDMCJypxBLSPQR2aAjn"
    "7ndmw2iicw3HMbe8VfEdKFYRqzic+efkb3nndiv/x1xSHDJWeSWkx3ButlYSuBs"
    "kLu6kd9Fswtemr3lgdDEmn04swr2Os0="
)

SIGNATURE_ALL_HEADERS = (
    "vSdrb+dS3EceC9bcwHSo4MlyKS59iFIrhgYkz8+oVLEEzmYZZvRs"
    "8rgOp+63LEM3v+MFHB32NfpB2bEKBIvB1q52LaEUHFv120V01IL+TAD48XaERZF"
    "ukWgHoBTLMhYS2Gb51gWxpeIq8knRmPnYePbF5MOkR0Zkly4zKH7s1dE="
)

SIGNATURE_HEADER_DEFAULT = (
    f'keyId="{RFC_KEY_ID}",algorithm="rsa-sha256",signature="{SIGNATURE_DEFAULT}"'
)

SIGNATURE_HEADER_BASIC = (
    f'keyId="{RFC_KEY_ID}",algorithm="rsa-sha256",'
    f'headers="(request-target) host date", signature="{SIGNATURE_BASIC}"'
)

SIGNATURE_HEADER_ALL_HEADERS = (
    f'keyId="{RFC_KEY_ID}",algorithm="rsa-sha256",'
    f'headers="(request-target) host date content-type digest content-length",'
    f'signature="{SIGNATURE_ALL_HEADERS}"'
)

HMAC_KEY_ID = "shared-secret"
EC_KEY_ID = "ec-key"


def rfc_request(**extra_headers) -> Request:
    """The sample POST request of the HTTP Signatures draft."""
    request = Request("POST", "http://example.com/foo?param=value&pet=dog")
    request.add_header("Host", "example.com")
    request.add_header("Date", RFC_DATE)
    request.add_header("Content-Type", "application/json")
    request.add_header("Digest", "SHA-256=X48E9qOokqqrvdts8nOJRJN3OWDUoyWxBf7kbu9DBPE=")
    request.add_header("Content-Length", "18")
    for name, value in extra_headers.items():
        request.add_header(name, value)
    return request


@pytest.fixture
def rfc_public_key():
    return load_der_public_key(base64.b64decode(RFC_PUBLIC_KEY))


@pytest.fixture
def rfc_private_key():
    return load_der_private_key(base64.b64decode(RFC_PRIVATE_KEY), password=None)


@pytest.fixture
def rfc_key_map(rfc_public_key, rfc_private_key):
    return DictKeyMap(
        public_keys={RFC_KEY_ID: rfc_public_key},
        private_keys={RFC_KEY_ID: rfc_private_key},
    )


@pytest.fixture
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def hmac_secret():
    return b"0123456789abcdef0123456789abcdef"


@pytest.fixture
def key_map(rfc_key_map, ec_private_key, hmac_secret):
    """Key map holding the RSA test key, an EC key pair and an HMAC secret."""
    return (rfc_key_map
            .add_key_pair(EC_KEY_ID, ec_private_key)
            .add_secret_key(HMAC_KEY_ID, hmac_secret))


@pytest.fixture
def request_message():
    return rfc_request()


def attach_hmac_signature(message, key_id, secret, headers):
    """
    Sign ``message`` without a signer, for header lists a signer refuses
    (such as ``(response-status)`` on a response).
    """
    signing_string = SigningStringBuilder(headers).signing_string(message)
    mac = Algorithm.HMAC_SHA256.create_mac().compute(secret, signing_string.encode("ascii"))
    elements = SignatureHeaderElements(
        key_id=key_id,
        algorithm=Algorithm.HMAC_SHA256,
        signed_headers=tuple(headers) or ("date",),
        signature=base64.b64encode(mac).decode("ascii"),
    )
    message.add_header("Signature", elements.to_header_value())
    return message
