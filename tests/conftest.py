"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import json
import logging
from unittest.mock import AsyncMock

import pytest

from datagenie.llm.base import BaseLLMProvider
from datagenie.llm.models import LLMResponse

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires API keys and a reachable backend)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """Capture everything down to DEBUG for every test."""
    # The CLI raises the package logger's level; start each test from scratch
    logging.getLogger("datagenie").setLevel(logging.NOTSET)
    caplog.set_level(logging.DEBUG)
    yield
    logging.getLogger("datagenie").setLevel(logging.NOTSET)


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Give every test a clean, key-bearing environment.

    A developer's .env is not loaded and the settings cache is cleared
    before and after each test.
    """
    from datagenie.config import clear_settings_cache

    clear_settings_cache()
    monkeypatch.setenv("DATAGENIE_ENV_SOURCE", "environment")
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_API_KEY", "sk-test-key-1234567890-abcdefghijklmnop")
    for name in ("LLM_ENDPOINT", "LLM_MODEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    yield
    clear_settings_cache()


# ============================================================================
# Common Test Data
# ============================================================================


@pytest.fixture
def sample_schema() -> dict:
    """Two related tables in the default schema."""
    return {
        "databaseName": "SalesDb",
        "serverName": "sql01",
        "tables": [
            {
                "schemaName": "dbo",
                "tableName": "Customers",
                "aliases": ["Clients"],
                "columns": [
                    {"columnName": "Id", "dataType": "int", "isNullable": False},
                    {
                        "columnName": "Name",
                        "dataType": "nvarchar",
                        "maxLength": 100,
                        "isNullable": False,
                    },
                    {"columnName": "SSN", "dataType": "char", "maxLength": 11, "isNullable": True},
                ],
                "primaryKey": {"constraintName": "PK_Customers", "columns": ["Id"]},
                "foreignKeys": [],
            },
            {
                "schemaName": "dbo",
                "tableName": "Orders",
                "columns": [
                    {"columnName": "Id", "dataType": "int", "isNullable": False},
                    {"columnName": "CustomerId", "dataType": "int", "isNullable": False},
                    {"columnName": "Total", "dataType": "decimal", "isNullable": True},
                ],
                "primaryKey": {"columns": ["Id"]},
                "foreignKeys": [
                    {
                        "constraintName": "FK_Orders_Customers",
                        "referencedSchema": "dbo",
                        "referencedTable": "Customers",
                        "columns": ["CustomerId"],
                        "referencedColumns": ["Id"],
                    }
                ],
            },
        ],
    }


@pytest.fixture
def sample_config() -> dict:
    """Business metadata for the sample schema."""
    return {
        "tableConfigurations": [
            {
                "schemaName": "dbo",
                "tableName": "Customers",
                "friendlyName": "Customer",
                "description": "People who buy things",
                "aliases": "buyers, clients",
                "columnConfigurations": [
                    {
                        "columnName": "SSN",
                        "friendlyName": "Social Security Number",
                        "isPii": True,
                        "isRestricted": True,
                    }
                ],
            }
        ],
        "joinHints": [
            {
                "fromTable": "dbo.Orders",
                "fromColumn": "CustomerId",
                "toTable": "dbo.Customers",
                "toColumn": "Id",
                "hint": "every order has one customer",
            }
        ],
        "requiredFilters": ["Orders.IsDeleted = 0"],
        "businessTerms": ["Revenue = SUM(Orders.Total)"],
    }


@pytest.fixture
def sample_schema_json(sample_schema) -> str:
    return json.dumps(sample_schema)


@pytest.fixture
def sample_config_json(sample_config) -> str:
    return json.dumps(sample_config)


# ============================================================================
# LLM Helpers
# ============================================================================


class StubProvider(BaseLLMProvider):
    """Provider whose generate() and aclose() are AsyncMocks."""

    def __init__(self, content: str = "SELECT 1", timeout: float = 5):
        super().__init__(provider_name="stub", model="stub-model", timeout=timeout)
        self.generate = AsyncMock(
            return_value=LLMResponse(content=content, model="stub-model", provider="stub")
        )
        self.aclose = AsyncMock()

    async def generate(self, request):  # pragma: no cover - replaced in __init__
        raise NotImplementedError


@pytest.fixture
def mock_llm_provider():
    """Factory for stub providers returning fixed content."""

    def _create(content: str = "SELECT 1", timeout: float = 5) -> StubProvider:
        return StubProvider(content=content, timeout=timeout)

    return _create
