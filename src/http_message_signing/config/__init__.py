"""
Configuration management for HTTP message signing

Settings for the signer and for logging, loaded from JSON with
environment variable overrides.
"""

from .settings import (
    HttpSignatureSettings,
    SignerSettings,
    LoggingSettings,
    configure_logging,
    PACKAGE_LOGGER,
)

__all__ = [
    'HttpSignatureSettings',
    'SignerSettings',
    'LoggingSettings',
    'configure_logging',
    'PACKAGE_LOGGER',
]
