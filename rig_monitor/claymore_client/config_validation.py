"""
Configuration Validation for the Claymore Client

This module provides validation functions for client and endpoint
configuration, ensuring that settings are within acceptable ranges before
a connection is attempted.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schemas import MinerEndpoint
from .utils.constants import DEFAULT_PORT, DEFAULT_TIMEOUT, VERSION_SUFFIX

logger = logging.getLogger(__name__)

# Environment variables read by load_client_config
ENV_TIMEOUT = "CLAYMORE_RPC_TIMEOUT"
ENV_PORT = "CLAYMORE_RPC_PORT"


class ValidationError(Exception):
    """Exception raised for configuration validation errors."""
    pass


class ClientConfig(BaseModel):
    """Validation model for client configuration."""
    model_config = ConfigDict(frozen=True)

    timeout: float = Field(DEFAULT_TIMEOUT, gt=0.0, le=120.0, description="Connect and read timeout in seconds (0-120)")
    default_port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Port used when an address has none")
    version_suffix: str = Field(VERSION_SUFFIX, description="Currency annotation stripped from the version string")

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Warn about timeouts too short for a rig on a busy network."""
        if v < 1.0:
            logger.warning(f"Timeout {v}s is very short. Status calls may fail on slow rigs.")
        return v


def validate_client_config(config: Dict[str, Any]) -> ClientConfig:
    """
    Validate client configuration.

    Args:
        config: Dictionary containing client configuration

    Returns:
        Validated configuration

    Raises:
        ValidationError: If validation fails
    """
    try:
        return ClientConfig(**config)
    except Exception as e:
        logger.error(f"Client configuration validation error: {str(e)}")
        raise ValidationError(f"Invalid client configuration: {str(e)}")


def validate_endpoint_config(config: Dict[str, Any]) -> MinerEndpoint:
    """
    Validate an endpoint definition.

    Args:
        config: Dictionary with "address" and optional "password"

    Returns:
        Validated endpoint

    Raises:
        ValidationError: If validation fails
    """
    try:
        return MinerEndpoint(**config)
    except Exception as e:
        logger.error(f"Endpoint configuration validation error: {str(e)}")
        raise ValidationError(f"Invalid endpoint configuration: {str(e)}")


def validate_json_config(json_str: str):
    """
    Validate a JSON configuration string.

    Args:
        json_str: JSON string containing configuration

    Returns:
        A MinerEndpoint if the JSON has an "address", otherwise a ClientConfig

    Raises:
        ValidationError: If validation fails
    """
    try:
        config = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {str(e)}")
        raise ValidationError(f"Invalid JSON: {str(e)}")

    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a JSON object")

    if "address" in config:
        return validate_endpoint_config(config)
    return validate_client_config(config)


def load_client_config(overrides: Optional[Dict[str, Any]] = None) -> ClientConfig:
    """
    Build the client configuration from defaults, environment and overrides.

    Args:
        overrides: Explicit settings that take precedence over the environment

    Returns:
        Validated configuration

    Raises:
        ValidationError: If a setting is invalid
    """
    config: Dict[str, Any] = {}

    if os.environ.get(ENV_TIMEOUT):
        config["timeout"] = os.environ[ENV_TIMEOUT]
    if os.environ.get(ENV_PORT):
        config["default_port"] = os.environ[ENV_PORT]

    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})

    return validate_client_config(config)
