# MCP server operations on an in-memory CodexConfig
from codexcfg.models import CodexConfig, McpService


def add_mcp_service(config: CodexConfig, service: McpService) -> McpService:
    """Add an MCP server, replacing any with the same id in place.

    ABOUTME: Managed servers override existing ones with same id
    ABOUTME: Normalizes empty env/extra_fields to None
    """
    if not service.id:
        raise ValueError("MCP server id must not be empty")

    service.env = service.env or None
    service.extra_fields = service.extra_fields or None

    for index, existing in enumerate(config.mcp_services):
        if existing.id == service.id:
            config.mcp_services[index] = service
            return service
    config.mcp_services.append(service)
    return service


def remove_mcp_service(config: CodexConfig, service_id: str) -> bool:
    """Remove an MCP server by id; False if it wasn't configured."""
    remaining = [s for s in config.mcp_services if s.id != service_id]
    if len(remaining) == len(config.mcp_services):
        return False
    config.mcp_services = remaining
    return True
