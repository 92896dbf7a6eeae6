"""
Settings for HTTP message signing

Settings are read from JSON (text, file or an already parsed dict) and can be
overridden with ``HTTPSIG_*`` environment variables. They describe which key
signs, with which algorithm, over which headers, and how the package logs.

Example::

    {
        "signer": {
            "key_id": "client-1",
            "algorithm": "rsa-sha256",
            "headers": ["(request-target)", "host", "date"],
            "private_key_file": "/etc/myapp/client-1.pem"
        },
        "logging": {"level": "DEBUG"}
    }
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..exceptions import ConfigurationError, ErrorCodes, UnsupportedAlgorithmError
from ..signing.algorithms import Algorithm
from ..signing.signing_config import SignerConfig, create_signing_config
from ..signing.types import DictKeyMap, KeyMap
from ..signing.utils import load_private_key_pem

PACKAGE_LOGGER = "http_message_signing"

ENV_KEY_ID = "HTTPSIG_KEY_ID"
ENV_ALGORITHM = "HTTPSIG_ALGORITHM"
ENV_HEADERS = "HTTPSIG_HEADERS"
ENV_PRIVATE_KEY_FILE = "HTTPSIG_PRIVATE_KEY_FILE"
ENV_SECRET_KEY_FILE = "HTTPSIG_SECRET_KEY_FILE"
ENV_LOG_LEVEL = "HTTPSIG_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class SignerSettings:
    """Signer settings"""
    key_id: Optional[str] = None
    algorithm: str = Algorithm.RSA_SHA256.value
    headers: List[str] = field(default_factory=list)
    private_key_file: Optional[str] = None
    secret_key_file: Optional[str] = None
    add_date: bool = True

    def __post_init__(self):
        try:
            Algorithm.from_name(self.algorithm)
        except UnsupportedAlgorithmError as e:
            raise ConfigurationError(e.message, ErrorCodes.INVALID_CONFIG, e.details) from e
        if isinstance(self.headers, str):
            self.headers = self.headers.split()

    def load_key_map(self) -> KeyMap:
        """
        Build a key map holding the configured key under ``key_id``.

        Raises:
            ConfigurationError: If no key id or key file is configured, or a
                key file cannot be read
            InvalidKeyError: If the private key file is not a supported key
        """
        if not self.key_id:
            raise ConfigurationError("Signer key_id is not configured", ErrorCodes.MISSING_REQUIRED_FIELD)

        key_map = DictKeyMap()
        if self.private_key_file:
            key_map.add_key_pair(self.key_id, load_private_key_pem(_read_file(self.private_key_file)))
        if self.secret_key_file:
            key_map.add_secret_key(self.key_id, _read_file(self.secret_key_file))

        if not (self.private_key_file or self.secret_key_file):
            raise ConfigurationError(
                "Neither private_key_file nor secret_key_file is configured",
                ErrorCodes.MISSING_REQUIRED_FIELD,
                {"key_id": self.key_id}
            )
        return key_map

    def to_signer_config(self, key_map: Optional[KeyMap] = None) -> SignerConfig:
        """
        Convert to a validated signer configuration.

        Args:
            key_map: Key source to use; loaded from the key files if None

        Raises:
            ConfigurationError: If the settings do not make a valid signer
        """
        builder = create_signing_config().algorithm(self.algorithm).headers_to_sign(self.headers)
        if self.key_id:
            builder.key_id(self.key_id)
        builder.key_map(key_map if key_map is not None else self.load_key_map())
        return builder.build()


@dataclass
class LoggingSettings:
    """Logging settings"""
    level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level '{self.level}'",
                ErrorCodes.INVALID_CONFIG,
                {"allowed": list(_LOG_LEVELS)}
            )


@dataclass
class HttpSignatureSettings:
    """Top-level settings"""
    signer: SignerSettings = field(default_factory=SignerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> 'HttpSignatureSettings':
        """
        Build settings from a parsed JSON object.

        Args:
            data: Parsed settings
            environ: Environment to read overrides from (none applied if None)

        Raises:
            ConfigurationError: If the settings are malformed
        """
        try:
            settings = cls(
                signer=SignerSettings(**data.get("signer", {})),
                logging=LoggingSettings(**data.get("logging", {})),
            )
        except (AttributeError, TypeError) as e:
            raise ConfigurationError(f"Invalid settings format: {e}", ErrorCodes.INVALID_CONFIG) from e

        if environ is not None:
            settings = settings.with_env_overrides(environ)
        return settings

    @classmethod
    def from_json(cls, json_string: str, environ: Optional[Mapping[str, str]] = None) -> 'HttpSignatureSettings':
        """Load settings from JSON text."""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse settings JSON: {e}", ErrorCodes.INVALID_CONFIG) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Settings JSON must be an object", ErrorCodes.INVALID_CONFIG)
        return cls.from_dict(data, environ)

    @classmethod
    def from_file(cls, file_path: Union[str, Path], environ: Optional[Mapping[str, str]] = None) -> 'HttpSignatureSettings':
        """Load settings from a JSON file."""
        return cls.from_json(_read_file(file_path).decode('utf-8'), environ)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'HttpSignatureSettings':
        """Build default settings overridden by the environment."""
        return cls().with_env_overrides(os.environ if environ is None else environ)

    def with_env_overrides(self, environ: Mapping[str, str]) -> 'HttpSignatureSettings':
        """
        Return a copy with ``HTTPSIG_*`` variables applied.

        ``HTTPSIG_HEADERS`` is a space separated list of header names.
        """
        signer_changes: Dict[str, Any] = {}
        if environ.get(ENV_KEY_ID):
            signer_changes["key_id"] = environ[ENV_KEY_ID]
        if environ.get(ENV_ALGORITHM):
            signer_changes["algorithm"] = environ[ENV_ALGORITHM]
        if environ.get(ENV_HEADERS):
            signer_changes["headers"] = environ[ENV_HEADERS].split()
        if environ.get(ENV_PRIVATE_KEY_FILE):
            signer_changes["private_key_file"] = environ[ENV_PRIVATE_KEY_FILE]
        if environ.get(ENV_SECRET_KEY_FILE):
            signer_changes["secret_key_file"] = environ[ENV_SECRET_KEY_FILE]

        logging_settings = self.logging
        if environ.get(ENV_LOG_LEVEL):
            logging_settings = replace(self.logging, level=environ[ENV_LOG_LEVEL])

        return HttpSignatureSettings(
            signer=replace(self.signer, **signer_changes),
            logging=logging_settings,
        )


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """
    Apply logging settings to the package logger.

    A stream handler is attached once; later calls only change the level.

    Returns:
        logging.Logger: The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.format))
        logger.addHandler(handler)
    return logger


def _read_file(file_path: Union[str, Path]) -> bytes:
    try:
        return Path(file_path).read_bytes()
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read file: {e}",
            ErrorCodes.INVALID_CONFIG,
            {"path": str(file_path)}
        ) from e
