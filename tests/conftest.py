"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

from typing import Iterator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from tests.helpers import BASE_URL, FakeLicenseServer
from uls_exporter.assembler import MetricsAssembler
from uls_exporter.config import ExporterConfig
from uls_exporter.server import create_app
from uls_exporter.upstream.client import UlsClient


@pytest.fixture
def fake_uls() -> FakeLicenseServer:
    """Healthy license server with no leases; tests adjust it as needed"""
    return FakeLicenseServer()


@pytest.fixture
def uls_client(fake_uls: FakeLicenseServer) -> Iterator[UlsClient]:
    """Upstream client wired to the fake license server"""
    with UlsClient(timeout=2.0, transport=fake_uls.transport()) as client:
        yield client


@pytest.fixture
def assembler(uls_client: UlsClient) -> MetricsAssembler:
    return MetricsAssembler(uls_client)


@pytest.fixture
def config() -> ExporterConfig:
    return ExporterConfig(base_url=BASE_URL, bind_addr="127.0.0.1:9837")


@pytest.fixture
def app(config: ExporterConfig, uls_client: UlsClient) -> Flask:
    app = create_app(config, uls_client)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app: Flask) -> Iterator[FlaskClient]:
    """Flask test client"""
    with app.test_client() as client:
        yield client
