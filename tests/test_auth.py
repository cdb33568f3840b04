# Coda MCP Server
# File: tests/test_auth.py
# Version: v1

import pytest

from coda_mcp.auth import (
    TenantCredentials,
    credentials_from_env,
    parse_tenant_credentials,
    validate_credentials,
)
from coda_mcp.errors import AuthenticationError


def test_headers_are_read_case_insensitively() -> None:
    creds = parse_tenant_credentials(
        {"x-coda-api-key": "k1", "X-CODA-BASE-URL": "https://coda.example.test/apis/v1"}
    )
    assert creds.api_key == "k1"
    assert creds.base_url == "https://coda.example.test/apis/v1"


def test_blank_headers_count_as_absent() -> None:
    creds = parse_tenant_credentials({"X-Coda-API-Key": "   ", "X-Coda-Base-URL": ""})
    assert creds == TenantCredentials(api_key=None, base_url=None)


def test_validate_rejects_missing_key() -> None:
    with pytest.raises(AuthenticationError) as info:
        validate_credentials(parse_tenant_credentials({}))
    assert "X-Coda-API-Key" in info.value.message


def test_validate_accepts_key_without_base_url() -> None:
    validate_credentials(TenantCredentials(api_key="k1"))


def test_repr_never_shows_the_key() -> None:
    text = repr(TenantCredentials(api_key="very-secret"))
    assert "very-secret" not in text
    assert "***" in text


def test_credentials_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CODA_API_KEY", " env-key ")
    monkeypatch.delenv("CODA_BASE_URL", raising=False)

    creds = credentials_from_env()
    assert creds.api_key == "env-key"
    assert creds.base_url is None
