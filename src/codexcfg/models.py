# Core data models for codexcfg
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Literal, Union

# ABOUTME: Any value tomli can hand back, plus None for "omit this key"
TomlValue = Union[
    str, int, float, bool, datetime, date, time,
    list["TomlValue"], dict[str, "TomlValue"], None,
]

WireApi = Literal["responses", "chat"]

DEFAULT_WIRE_API: WireApi = "responses"
DEFAULT_TEMP_ENV_KEY = "OPENAI_API_KEY"


@dataclass
class Provider:
    """Model provider section ([model_providers.<id>]).

    ABOUTME: id is the table key and never changes on rename, only name does
    ABOUTME: extra_fields keeps provider keys codexcfg does not model
    """
    id: str
    name: str
    base_url: str = ""
    wire_api: WireApi = DEFAULT_WIRE_API
    temp_env_key: str = DEFAULT_TEMP_ENV_KEY
    requires_openai_auth: bool = True
    model: str | None = None
    extra_fields: dict[str, TomlValue] | None = None


@dataclass
class McpService:
    """MCP server section ([mcp_servers.<id>]).

    ABOUTME: env and extra_fields are None rather than empty
    ABOUTME: command is None for URL-based servers
    """
    id: str
    command: str | None
    args: list[TomlValue] = field(default_factory=list)
    env: dict[str, TomlValue] | None = None
    startup_timeout_sec: int | float | None = None
    extra_fields: dict[str, TomlValue] | None = None


@dataclass
class CodexConfig:
    """In-memory view of a Codex config.toml.

    ABOUTME: Managed state (providers, services, globals) is mutated freely
    ABOUTME: unmanaged_lines is verbatim passthrough, order significant
    """
    model: str | None = None
    model_provider: str | None = None
    model_provider_commented: bool = False
    providers: list[Provider] = field(default_factory=list)
    mcp_services: list[McpService] = field(default_factory=list)
    unmanaged_lines: list[str] = field(default_factory=list)

    @property
    def is_managed(self) -> bool:
        """True when the document carries anything codexcfg manages."""
        return bool(
            self.providers
            or self.mcp_services
            or self.model_provider is not None
            or self.model is not None
        )

    def get_provider(self, provider_id: str) -> Provider | None:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        return None

    def get_mcp_service(self, service_id: str) -> McpService | None:
        for service in self.mcp_services:
            if service.id == service_id:
                return service
        return None
