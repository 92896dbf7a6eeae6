"""
Command-line interface for HTTP message signing
Builds signing strings, signs and verifies requests described on the command line
"""

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config import HttpSignatureSettings, configure_logging
from .exceptions import HttpSignatureError
from .signing import (
    DictKeyMap,
    HttpMessageSigner,
    Request,
    SigningStringBuilder,
    format_http_date,
    load_public_key_pem,
)
from .signing.header import parse_signed_headers
from .signing.types import HEADER_DATE, HEADER_SIGNATURE
from .verification import HttpMessageSignatureVerifier


def parse_header_arg(value: str) -> Tuple[str, str]:
    """Parse a ``Name: value`` command-line header."""
    name, sep, header_value = value.partition(':')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header '{value}', expected 'Name: value'")
    return name.strip(), header_value.strip()


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='http-message-signing',
        description='Sign and verify HTTP messages with the Signature header'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'HTTP Message Signing {__version__}'
    )

    parser.add_argument(
        '--config',
        help='JSON settings file (HTTPSIG_* environment variables override it)'
    )

    parser.add_argument(
        '--log-level',
        choices=['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'],
        help='Log level for the http_message_signing logger'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_signing_string_parser(subparsers)
    setup_sign_parser(subparsers)
    setup_verify_parser(subparsers)

    return parser


def add_request_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the arguments describing a request."""
    parser.add_argument('--method', default='GET', help='Request method (default: GET)')
    parser.add_argument('--uri', required=True, help='Request target or absolute URL')
    parser.add_argument(
        '-H', '--header',
        dest='headers',
        action='append',
        type=parse_header_arg,
        default=[],
        help="Request header as 'Name: value' (repeatable)"
    )


def setup_signing_string_parser(subparsers):
    """Setup signing-string subcommand."""
    parser = subparsers.add_parser('signing-string', help='Print the signing string of a request')
    add_request_arguments(parser)
    parser.add_argument(
        '--sign-headers',
        help="Space separated headers to sign (default: the Date header only)"
    )


def setup_sign_parser(subparsers):
    """Setup sign subcommand."""
    parser = subparsers.add_parser('sign', help='Print the Signature headers for a request')
    add_request_arguments(parser)
    parser.add_argument('--key-id', help='Key identifier sent as keyId')
    parser.add_argument('--algorithm', help='Signature algorithm (default: rsa-sha256)')
    parser.add_argument('--sign-headers', help='Space separated headers to sign')
    parser.add_argument('--private-key', help='PEM private key file')
    parser.add_argument('--secret-key-file', help='File holding the raw HMAC secret')
    parser.add_argument(
        '--no-add-date',
        action='store_true',
        help='Do not add a Date header when the request has none'
    )


def setup_verify_parser(subparsers):
    """Setup verify subcommand."""
    parser = subparsers.add_parser('verify', help='Verify a signed request')
    add_request_arguments(parser)
    parser.add_argument('--key-id', required=True, help='Key identifier the key is registered under')
    key_group = parser.add_mutually_exclusive_group(required=True)
    key_group.add_argument('--public-key', help='PEM public key file')
    key_group.add_argument('--secret-key-file', help='File holding the raw HMAC secret')


def build_request(args) -> Request:
    return Request(args.method, args.uri, list(args.headers))


def load_settings(args) -> HttpSignatureSettings:
    """Load settings from --config or defaults, with environment overrides."""
    if args.config:
        return HttpSignatureSettings.from_file(args.config, environ=os.environ)
    return HttpSignatureSettings.from_env()


def handle_signing_string_command(args) -> int:
    """Handle signing-string command."""
    headers = parse_signed_headers(args.sign_headers) if args.sign_headers else []
    print(SigningStringBuilder(headers).signing_string(build_request(args)))
    return 0


def handle_sign_command(args, settings: HttpSignatureSettings) -> int:
    """Handle sign command."""
    changes = {}
    if args.key_id:
        changes['key_id'] = args.key_id
    if args.algorithm:
        changes['algorithm'] = args.algorithm
    if args.sign_headers:
        changes['headers'] = args.sign_headers.split()
    if args.private_key:
        changes['private_key_file'] = args.private_key
    if args.secret_key_file:
        changes['secret_key_file'] = args.secret_key_file
    if args.no_add_date:
        changes['add_date'] = False
    signer_settings = replace(settings.signer, **changes)

    signer = HttpMessageSigner(signer_settings.to_signer_config())
    request = build_request(args)

    added: List[Tuple[str, str]] = []
    if signer_settings.add_date and not request.header_values(HEADER_DATE):
        date = format_http_date()
        request.add_header(HEADER_DATE, date)
        added.append((HEADER_DATE, date))

    signer.sign(request)
    added.extend((HEADER_SIGNATURE, value) for value in request.header_values(HEADER_SIGNATURE))

    for name, value in added:
        print(f"{name}: {value}")
    return 0


def handle_verify_command(args) -> int:
    """Handle verify command."""
    key_map = DictKeyMap()
    if args.public_key:
        key_map.public_keys[args.key_id] = load_public_key_pem(Path(args.public_key).read_bytes())
    else:
        key_map.add_secret_key(args.key_id, Path(args.secret_key_file).read_bytes())

    verifier = HttpMessageSignatureVerifier(key_map)
    if verifier.verify(build_request(args)):
        print("✓ Signature is valid")
        return 0

    print("✗ Signature is invalid")
    return 1


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
        if args.log_level:
            settings = replace(settings, logging=replace(settings.logging, level=args.log_level))
        configure_logging(settings.logging)

        if args.command == 'signing-string':
            return handle_signing_string_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args, settings)
        elif args.command == 'verify':
            return handle_verify_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (HttpSignatureError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
