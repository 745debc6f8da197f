"""
Config Loader - Load runtime configuration from YAML

Example config.yaml:

    llm:
      provider: openrouter
      model: anthropic/claude-3.5-sonnet
      api_key: ${OPENROUTER_API_KEY}
    agent:
      max_iterations: 10
    tools:
      workspace: ./workspace
    runtime:
      max_concurrent_tasks: 16
      shutdown_timeout: 5.0
    logging:
      level: info
      format: text

``${VAR}`` references are replaced with environment variable values before
the YAML is parsed.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError, ErrorCode
from .llm.base import BaseLLMClient
from .llm.factory import create_client, supported_providers
from .tools.registry import ToolRegistry
from .tools.write_file import WriteFileTool

logger = logging.getLogger(__name__)

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


class LLMSettings(BaseModel):
    """Provider credential/endpoint plus sampling defaults"""
    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    provider: str = "openrouter"
    model: str = "anthropic/claude-3.5-sonnet"
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, gt=0)
    timeout: float = Field(default=60.0, gt=0)
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("provider")
    @classmethod
    def _known_provider(cls, value: str) -> str:
        value = value.lower()
        if value not in supported_providers():
            raise ValueError(
                f"Unsupported provider: {value} (expected one of {', '.join(supported_providers())})"
            )
        return value


class AgentSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_iterations: int = Field(default=10, ge=1)


class ToolToggle(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True


class ToolsSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    workspace: str = "./workspace"
    write_file: ToolToggle = Field(default_factory=ToolToggle)


class RuntimeSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_concurrent_tasks: int = Field(default=16, ge=1)
    shutdown_timeout: float = Field(default=5.0, gt=0)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["debug", "info", "warning", "error"] = "info"
    format: Literal["text", "json"] = "text"

    @field_validator("level", "format", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class Config(BaseModel):
    """Top-level PicoClaw configuration"""
    model_config = ConfigDict(extra="forbid")

    llm: LLMSettings = Field(default_factory=LLMSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    tools: ToolsSettings = Field(default_factory=ToolsSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _substitute_env(raw: str, path: Union[str, Path]) -> str:
    """Replace ${VAR} with environment variable values."""
    def _replace_env(match):
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' not set",
                context=f"referenced in config file '{path}'",
            )
        return value

    return _ENV_PATTERN.sub(_replace_env, raw)


def parse_config(data: Optional[Dict[str, Any]]) -> Config:
    """Validate an already-loaded mapping into a Config"""
    try:
        return Config.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Union[str, Path]) -> Config:
    """
    Read a YAML config file.

    Raises:
        ConfigError: File missing, unreadable, not YAML, or invalid
    """
    path = Path(path)
    if not path.is_file():
        error = ConfigError(f"Config file not found: {path}")
        error.code = ErrorCode.CONFIG_NOT_FOUND
        raise error

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file: {e}", context=str(path)) from e
    resolved = _substitute_env(raw, path)

    try:
        data = yaml.safe_load(resolved)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}", context=str(path)) from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping", context=str(path))

    config = parse_config(data)
    logger.info(f"Loaded config from {path}: provider={config.llm.provider}, model={config.llm.model}")
    return config


def build_llm_client(config: Config, **kwargs) -> BaseLLMClient:
    """Create the provider client described by ``config.llm``"""
    llm = config.llm
    return create_client(
        llm.provider,
        llm.model,
        api_key=llm.api_key,
        api_base=llm.api_base,
        temperature=llm.temperature,
        max_tokens=llm.max_tokens,
        timeout=llm.timeout,
        extra=dict(llm.extra),
        **kwargs,
    )


def build_tool_registry(config: Config, registry: Optional[ToolRegistry] = None) -> ToolRegistry:
    """Register the built-in tools enabled in ``config.tools``"""
    if registry is None:
        registry = ToolRegistry()
    if config.tools.write_file.enabled:
        registry.register(WriteFileTool(workspace=config.tools.workspace))
    return registry
