"""Configuration file support for variant-inspector."""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .annotations.backend import API_TOKEN_ENV_VAR, DEFAULT_BACKEND_URL

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

CONFIG_SECTION = "variant_inspector"

# Keys that would carry the backend token if someone put it in the file
CREDENTIAL_KEYS = {"token", "api_token", "backend_token", "password", "secret", "authorization"}
CREDENTIAL_SUFFIXES = ("_token", "_password", "_secret")


@dataclass
class InspectorConfig:
    """Configuration for a variant inspector session."""

    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout: float = 30.0
    default_quality: str = "PASS"
    report_store_path: Path | None = None
    log_level: str = "INFO"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


class CredentialInConfigError(Exception):
    """Raised when credentials are detected in configuration files."""

    pass


def detect_credentials_in_config(toml_data: dict[str, Any], warn_only: bool = True) -> list[str]:
    """Find secret-looking keys set in the ``[variant_inspector]`` section.

    The backend token is only ever read from the environment, so a
    non-empty token, password or secret key in the file is a mistake.

    Returns:
        Dotted names of the offending keys, e.g. ``variant_inspector.api_token``.

    Raises:
        CredentialInConfigError: If any are found and ``warn_only`` is False.
    """
    section = toml_data.get(CONFIG_SECTION)
    if not isinstance(section, dict):
        return []

    detected = [
        f"{CONFIG_SECTION}.{key}"
        for key, value in section.items()
        if value
        and (key.lower() in CREDENTIAL_KEYS or key.lower().endswith(CREDENTIAL_SUFFIXES))
    ]
    if not detected:
        return detected

    msg = (
        f"Backend credentials found in config file: {', '.join(detected)}. "
        f"Set the token in the {API_TOKEN_ENV_VAR} environment variable instead."
    )
    if not warn_only:
        raise CredentialInConfigError(msg)
    logger.warning(msg)
    return detected


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    if "backend_url" in config_dict:
        backend_url = config_dict["backend_url"]
        if not isinstance(backend_url, str) or not backend_url.startswith(("http://", "https://")):
            raise ConfigValidationError(
                f"backend_url must be an http(s) URL, got {backend_url!r}"
            )

    if "request_timeout" in config_dict:
        timeout = config_dict["request_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            raise ConfigValidationError(
                f"request_timeout must be a number, got {type(timeout).__name__}"
            )
        if timeout <= 0:
            raise ConfigValidationError(f"request_timeout must be positive, got {timeout}")

    if "default_quality" in config_dict:
        quality = config_dict["default_quality"]
        if not isinstance(quality, str) or not quality.strip():
            raise ConfigValidationError("default_quality must be a non-empty string")

    if "log_level" in config_dict:
        log_level = config_dict["log_level"]
        if not isinstance(log_level, str):
            raise ConfigValidationError(
                f"log_level must be a string, got {type(log_level).__name__}"
            )
        if log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {VALID_LOG_LEVELS}, got '{log_level}'"
            )


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> InspectorConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML configuration file.
        overrides: Optional dict of values to override loaded config.

    Returns:
        InspectorConfig instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If any configuration value is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    detect_credentials_in_config(toml_data, warn_only=True)

    config_dict = toml_data.get(CONFIG_SECTION, {})

    if overrides:
        config_dict.update(overrides)

    validate_config(config_dict)

    valid_fields = {
        "backend_url",
        "request_timeout",
        "default_quality",
        "report_store_path",
        "log_level",
    }

    filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}
    if filtered_config.get("report_store_path"):
        filtered_config["report_store_path"] = Path(filtered_config["report_store_path"])
    if "log_level" in filtered_config:
        filtered_config["log_level"] = filtered_config["log_level"].upper()

    return InspectorConfig(**filtered_config)
