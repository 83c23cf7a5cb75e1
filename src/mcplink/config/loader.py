"""mcplink configuration loader."""

import os
import re
import typing
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from mcplink.errors import MCPLinkError, create_error
from mcplink.logging.logger import MCPLinkLogger
from mcplink.mcp.types import ServerConfig
from mcplink.types import ValidationIssue, ValidationResult

from .models import MCPLinkConfig

CONFIG_PATH_ENV = "MCPLINK_CONFIG_PATH"
LOCAL_CONFIG_FILE = "mcplink.yaml"

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([?-])([^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in a string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Raises:
        ConfigurationError: If a required variable is not set
    """

    def replacer(match: re.Match[str]) -> str:
        var_name, operator, operand = match.group(1), match.group(2), match.group(3)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        if operator == "?":
            raise create_error(
                "CONFIG_INVALID",
                detail=operand or f"Required environment variable {var_name} not set",
            )
        raise create_error(
            "CONFIG_INVALID",
            detail=f"Required environment variable {var_name} not set",
        )

    return _ENV_PATTERN.sub(replacer, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries. Values in ``override`` win; lists are replaced."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    if isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and value > 0


class ConfigLoader:
    """Load and validate mcplink configuration."""

    VALID_KEYS = frozenset({"manager", "logging", "api", "servers", "autoconnect"})

    def __init__(self, logger: MCPLinkLogger | None = None):
        """Initialize config loader.

        Args:
            logger: Optional MCPLinkLogger instance
        """
        self._config: MCPLinkConfig | None = None
        self._config_path: Path | None = None
        self._logger = logger

    @property
    def config_path(self) -> Path | None:
        """Path of the file the current configuration came from, if any."""
        return self._config_path

    def load(
        self,
        path: str | Path | None = None,
        use_defaults: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> MCPLinkConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. MCPLINK_CONFIG_PATH environment variable
        2. ./mcplink.yaml
        3. ~/.mcplink/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: Fall back to defaults when no file is found
            overrides: Values deep-merged over the file contents

        Returns:
            Loaded MCPLinkConfig instance

        Raises:
            ConfigurationError: If the file is missing (without defaults) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                self._log_info("No config file found, using default configuration")
                return self.load_from_dict(overrides or {})
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Config file must contain a mapping, got {type(data).__name__}",
            )

        data = _resolve_env_vars_recursive(data)
        if overrides:
            data = deep_merge(data, overrides)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> MCPLinkConfig:
        """Default configuration, no file involved."""
        return self.load_from_dict({})

    def load_from_dict(self, data: dict[str, Any], config_path: Path | None = None) -> MCPLinkConfig:
        """Load configuration from a dictionary.

        Raises:
            ConfigurationError: Listing every validation error found
        """
        validation = self.validate(data)
        for warning in validation.warnings:
            self._log_warn(warning.message, path=warning.path)
        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._dict_to_config(data)
        except MCPLinkError:
            raise
        except Exception as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path
        self._log_info(
            "Configuration loaded successfully",
            path=str(config_path) if config_path else None,
            servers=len(config.servers),
        )
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading it.

        Unknown top-level keys are warnings; everything else is an error.
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for key in data:
            if key not in self.VALID_KEYS:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        for section in ("manager", "logging", "api"):
            if section in data and not isinstance(data[section], dict):
                errors.append(ValidationIssue(path=section, message=f"{section} must be a dictionary"))

        manager = data.get("manager")
        if isinstance(manager, dict):
            for timeout_key in ("connect_timeout", "disconnect_timeout"):
                if timeout_key in manager and not _is_positive_number(manager[timeout_key]):
                    errors.append(
                        ValidationIssue(
                            path=f"manager.{timeout_key}",
                            message=f"{timeout_key} must be a positive number",
                        )
                    )

        api = data.get("api")
        if isinstance(api, dict) and "port" in api:
            port = api["port"]
            if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
                errors.append(ValidationIssue(path="api.port", message="port must be an integer in 1-65535"))

        if "autoconnect" in data and not isinstance(data["autoconnect"], bool):
            errors.append(ValidationIssue(path="autoconnect", message="autoconnect must be a boolean"))

        errors.extend(self._validate_servers(data.get("servers")))

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def _validate_servers(self, servers: Any) -> list[ValidationIssue]:
        if servers is None:
            return []
        if not isinstance(servers, list):
            return [ValidationIssue(path="servers", message="servers must be a list")]

        issues: list[ValidationIssue] = []
        seen: set[str] = set()
        for index, entry in enumerate(servers):
            path = f"servers[{index}]"
            try:
                server = ServerConfig.from_dict(entry)
            except MCPLinkError as e:
                issues.append(ValidationIssue(path=path, message=e.detail or e.message))
                continue
            if server.id in seen:
                issues.append(ValidationIssue(path=f"{path}.id", message=f"Duplicate server id: {server.id}"))
            seen.add(server.id)
        return issues

    def get(self) -> MCPLinkConfig:
        """Current configuration.

        Raises:
            ConfigurationError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def _resolve_config_path(self) -> Path:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        local_path = Path(LOCAL_CONFIG_FILE)
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".mcplink" / "config.yaml"
        if home_path.exists():
            return home_path

        # Not found - the caller falls back to defaults
        return local_path

    def _dict_to_config(self, data: dict[str, Any]) -> MCPLinkConfig:
        kwargs: dict[str, Any] = {}
        for f in fields(MCPLinkConfig):
            if f.name not in data:
                continue
            if f.name == "servers":
                kwargs["servers"] = [ServerConfig.from_dict(entry) for entry in data["servers"] or []]
            else:
                kwargs[f.name] = self._convert_field(f.type, data[f.name])
        return MCPLinkConfig(**kwargs)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert a raw value to the declared field type (dataclass, enum, list, primitive)."""
        if value is None:
            return None

        origin = typing.get_origin(field_type)
        if origin is list:
            args = typing.get_args(field_type)
            if isinstance(value, list) and args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if is_dataclass(field_type) and isinstance(value, dict):
            known = {f.name: f for f in fields(field_type)}
            return field_type(
                **{
                    name: self._convert_field(known[name].type, raw)
                    for name, raw in value.items()
                    if name in known
                }
            )

        if isinstance(field_type, type) and issubclass(field_type, Enum) and isinstance(value, str):
            try:
                return field_type(value)
            except ValueError:
                # Accept case-insensitive spellings (e.g. "info", "JSON")
                for member in field_type:
                    if member.value.lower() == value.lower():
                        return member
                raise

        return value

    def _log_info(self, message: str, **context: Any) -> None:
        if self._logger:
            self._logger.info("config", message, **context)

    def _log_warn(self, message: str, **context: Any) -> None:
        if self._logger:
            self._logger.warn("config", message, **context)


def load_config(path: str | Path | None = None, logger: MCPLinkLogger | None = None) -> MCPLinkConfig:
    """Convenience function to load config."""
    return ConfigLoader(logger).load(path)
