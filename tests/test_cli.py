"""
Test suite for the command-line interface
"""

import argparse
import logging

import pytest
from cryptography.hazmat.primitives import serialization

from http_message_signing.cli import create_parser, main, parse_header_arg
from http_message_signing.config import PACKAGE_LOGGER

from conftest import (
    RFC_DATE,
    SIGNATURE_BASIC,
    SIGNATURE_HEADER_BASIC,
    SIGNING_STRING_BASIC,
    SIGNING_STRING_DEFAULT,
)

RFC_ARGS = [
    "--method", "POST",
    "--uri", "http://example.com/foo?param=value&pet=dog",
    "-H", "Host: example.com",
    "-H", f"Date: {RFC_DATE}",
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in ("HTTPSIG_KEY_ID", "HTTPSIG_ALGORITHM", "HTTPSIG_HEADERS",
                 "HTTPSIG_PRIVATE_KEY_FILE", "HTTPSIG_SECRET_KEY_FILE", "HTTPSIG_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def private_key_file(tmp_path, rfc_private_key):
    path = tmp_path / "test.pem"
    path.write_bytes(rfc_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ))
    return str(path)


@pytest.fixture
def public_key_file(tmp_path, rfc_public_key):
    path = tmp_path / "test.pub.pem"
    path.write_bytes(rfc_public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ))
    return str(path)


class TestParseHeaderArg:
    """Test header argument parsing"""

    def test_value_with_colons(self):
        assert parse_header_arg(f"Date: {RFC_DATE}") == ("Date", RFC_DATE)

    def test_empty_value(self):
        assert parse_header_arg("X-Empty:") == ("X-Empty", "")

    @pytest.mark.parametrize("value", ["no separator", ": value"])
    def test_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_header_arg(value)


class TestSigningStringCommand:
    """Test the signing-string command"""

    def test_default_headers(self, capsys):
        assert main(["signing-string"] + RFC_ARGS) == 0
        assert capsys.readouterr().out == SIGNING_STRING_DEFAULT + "\n"

    def test_basic_headers(self, capsys):
        exit_code = main(["signing-string"] + RFC_ARGS + ["--sign-headers", "(request-target) host date"])

        assert exit_code == 0
        assert capsys.readouterr().out == SIGNING_STRING_BASIC + "\n"

    def test_missing_header(self, capsys):
        exit_code = main(["signing-string"] + RFC_ARGS + ["--sign-headers", "date digest"])

        assert exit_code == 1
        assert "Error: The following headers cannot be found in the message: 'digest'" in capsys.readouterr().err


class TestSignCommand:
    """Test the sign command"""

    def test_rfc_basic_signature(self, capsys, private_key_file):
        exit_code = main(["sign"] + RFC_ARGS + [
            "--key-id", "Test",
            "--private-key", private_key_file,
            "--sign-headers", "(request-target) host date",
            "--no-add-date",
        ])

        assert exit_code == 0
        assert capsys.readouterr().out.splitlines() == [
            'Signature: keyId="Test"',
            'Signature: algorithm="rsa-sha256"',
            'Signature: headers="(request-target) host date"',
            f'Signature: signature="{SIGNATURE_BASIC}"',
        ]

    def test_date_is_added(self, capsys, tmp_path):
        secret = tmp_path / "secret"
        secret.write_bytes(b"shared secret")

        exit_code = main([
            "sign",
            "--uri", "/status",
            "--key-id", "k1",
            "--algorithm", "hmac-sha256",
            "--secret-key-file", str(secret),
        ])

        lines = capsys.readouterr().out.splitlines()
        assert exit_code == 0
        assert lines[0].startswith("Date: ")
        assert lines[0].endswith(" GMT")
        assert lines[1] == 'Signature: keyId="k1"'

    def test_settings_from_config_file(self, capsys, tmp_path, private_key_file):
        config = tmp_path / "settings.json"
        config.write_text(
            '{"signer": {"key_id": "Test", "headers": ["(request-target)", "host", "date"],'
            f' "private_key_file": "{private_key_file}", "add_date": false}}}}'
        )

        exit_code = main(["--config", str(config), "sign"] + RFC_ARGS)

        assert exit_code == 0
        assert f'Signature: signature="{SIGNATURE_BASIC}"' in capsys.readouterr().out

    def test_missing_key(self, capsys):
        exit_code = main(["sign"] + RFC_ARGS + ["--key-id", "Test"])

        assert exit_code == 1
        assert capsys.readouterr().err.startswith("Error: ")

    def test_unknown_algorithm(self, capsys, private_key_file):
        exit_code = main(["sign"] + RFC_ARGS + [
            "--key-id", "Test", "--private-key", private_key_file, "--algorithm", "rsa-sha512",
        ])

        assert exit_code == 1
        assert "Unsupported algorithm 'rsa-sha512'" in capsys.readouterr().err


class TestVerifyCommand:
    """Test the verify command"""

    def test_valid_signature(self, capsys, public_key_file):
        exit_code = main(["verify"] + RFC_ARGS + [
            "-H", f"Signature: {SIGNATURE_HEADER_BASIC}",
            "--key-id", "Test",
            "--public-key", public_key_file,
        ])

        assert exit_code == 0
        assert "Signature is valid" in capsys.readouterr().out

    def test_tampered_request(self, capsys, public_key_file):
        args = ["verify"] + RFC_ARGS + [
            "-H", f"Signature: {SIGNATURE_HEADER_BASIC}",
            "--key-id", "Test",
            "--public-key", public_key_file,
        ]
        args[args.index("POST")] = "PUT"

        assert main(args) == 1
        assert "Signature is invalid" in capsys.readouterr().out

    def test_unreadable_key_file(self, capsys, tmp_path):
        exit_code = main(["verify"] + RFC_ARGS + [
            "-H", f"Signature: {SIGNATURE_HEADER_BASIC}",
            "--key-id", "Test",
            "--public-key", str(tmp_path / "absent.pem"),
        ])

        assert exit_code == 1
        assert capsys.readouterr().err.startswith("Error: ")

    def test_key_options_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(
                ["verify", "--uri", "/", "--key-id", "k", "--public-key", "a", "--secret-key-file", "b"]
            )


class TestMain:
    """Test the entry point"""

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage: http-message-signing" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "HTTP Message Signing" in capsys.readouterr().out

    def test_log_level_option(self, capsys):
        main(["--log-level", "DEBUG", "signing-string"] + RFC_ARGS)

        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
