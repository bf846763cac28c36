# ABOUTME: Tests for provider and MCP server validation
from unittest.mock import patch

from codexcfg.models import McpService, Provider
from codexcfg.utils.validation import (
    ValidationError,
    validate_command_exists,
    validate_provider,
    validate_service,
    validate_url,
)


class TestValidateUrl:
    def test_valid_urls(self):
        assert validate_url("https://api.acme.test/v1") is None
        assert validate_url("http://localhost:8080") is None

    def test_wrong_scheme(self):
        error = validate_url("ftp://acme.test")
        assert error is not None
        assert "HTTP or HTTPS" in error.message

    def test_missing_host(self):
        error = validate_url("https://")
        assert error is not None
        assert "missing host" in error.message

    def test_empty(self):
        assert validate_url("") is not None


class TestValidateCommandExists:
    def test_found(self):
        with patch("codexcfg.utils.validation.shutil.which", return_value="/usr/bin/npx"):
            assert validate_command_exists("npx") is None

    def test_not_found(self):
        with patch("codexcfg.utils.validation.shutil.which", return_value=None):
            error = validate_command_exists("nope")
        assert error is not None
        assert "Command not found: nope" in error.message


class TestValidateProvider:
    def test_valid(self):
        provider = Provider(id="acme", name="Acme", base_url="https://acme.test")
        assert validate_provider(provider) == []

    def test_bad_url_is_error(self):
        errors = validate_provider(Provider(id="acme", name="Acme", base_url="acme.test"))
        assert [e.severity for e in errors] == ["error"]
        assert errors[0].name == "acme"

    def test_unknown_wire_api_is_warning(self):
        provider = Provider(id="acme", name="Acme", base_url="https://acme.test", wire_api="grpc")
        errors = validate_provider(provider)
        assert len(errors) == 1
        assert errors[0].severity == "warning"
        assert "grpc" in errors[0].message

    def test_empty_env_key_with_auth_is_warning(self):
        provider = Provider(id="acme", name="Acme", base_url="https://acme.test", temp_env_key="")
        assert [e.severity for e in validate_provider(provider)] == ["warning"]

        provider.requires_openai_auth = False
        assert validate_provider(provider) == []


class TestValidateService:
    def test_missing_binary_is_warning(self):
        with patch("codexcfg.utils.validation.shutil.which", return_value=None):
            errors = validate_service(McpService(id="fs", command="npx"))
        assert errors == [ValidationError(name="fs", message="Command not found: npx", severity="warning")]

    def test_url_server_is_valid(self):
        service = McpService(id="remote", command=None, extra_fields={"url": "https://mcp.test"})
        assert validate_service(service) == []

    def test_no_command_no_url_is_error(self):
        errors = validate_service(McpService(id="empty", command=None))
        assert [e.severity for e in errors] == ["error"]
