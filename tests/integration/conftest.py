"""Shared fixtures for integration tests."""

from pathlib import Path
from typing import Generator

import pytest
import yaml
from fastapi.testclient import TestClient

import constants
from configuration import AppConfig, configuration
from tests.unit.utils.model_backends import FakeModelBackend

TEST_CONFIG = Path(__file__).parent.parent / "configuration" / "token-usage-tracker.yaml"


@pytest.fixture(autouse=True)
def reset_configuration_state() -> Generator:
    """Reset configuration state before each integration test.

    This autouse fixture ensures test independence by resetting the
    singleton configuration state before each test runs. This allows
    tests to verify both loaded and unloaded configuration states
    regardless of execution order.
    """
    # pylint: disable=protected-access
    configuration._configuration = None
    yield


@pytest.fixture(name="test_config", scope="function")
def test_config_fixture() -> Generator[AppConfig, None, None]:
    """Load real configuration for integration tests."""
    assert TEST_CONFIG.exists(), f"Config file not found: {TEST_CONFIG}"

    configuration.load_configuration(str(TEST_CONFIG))

    yield configuration
    # Note: Cleanup is handled by the autouse reset_configuration_state fixture


@pytest.fixture(name="config_file")
def config_file_fixture(tmp_path: Path) -> Path:
    """Write test configuration using fresh SQLite database file."""
    with open(TEST_CONFIG, encoding="utf-8") as fin:
        config_dict = yaml.safe_load(fin)
    config_dict["database"] = {"sqlite": {"db_path": str(tmp_path / "accounts.db")}}

    config_file = tmp_path / "token-usage-tracker.yaml"
    with open(config_file, "w", encoding="utf-8") as fout:
        yaml.safe_dump(config_dict, fout)
    return config_file


@pytest.fixture(name="model_backend")
def model_backend_fixture() -> FakeModelBackend:
    """Model replying with 50 input and 20 output tokens."""
    return FakeModelBackend(input_tokens=50, output_tokens=20)


@pytest.fixture(name="client")
def client_fixture(
    config_file: Path,
    model_backend: FakeModelBackend,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[TestClient, None, None]:
    """Run the whole service against fresh database.

    Only the generative model is replaced, it is the single external
    service the tracker calls.
    """
    monkeypatch.setenv(constants.CONFIG_PATH_ENV_VAR, str(config_file))
    configuration.load_configuration(str(config_file))

    # pylint: disable=import-outside-toplevel
    from app.main import app
    from utils.endpoints import get_model_backend

    app.dependency_overrides[get_model_backend] = lambda: model_backend
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
