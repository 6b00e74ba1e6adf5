"""Shared pytest fixtures for tests."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from datomic_flare import Flare


def _make_response(status_code: int = 200, json_data=None, text: str = "") -> Mock:
    response = Mock(status_code=status_code, text=text)
    response.json.return_value = json_data
    return response


@pytest.fixture
def make_response():
    """Factory for mock httpx responses."""
    return _make_response


@pytest.fixture
def mock_http_client():
    """Patch httpx.Client as used by the transport; yields the inner client."""
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    with patch("datomic_flare.http.httpx.Client", return_value=client):
        yield client


@pytest.fixture
def flare():
    """Client whose requests are only ever made in debug mode."""
    return Flare(address="://")


@pytest.fixture
def overridden_flare():
    """Client forcing the purple database as of a fixed basis."""
    return Flare(
        address="://",
        dangerously_override={"database": {"name": "purple", "as_of": 13194139534323}},
    )


@pytest.fixture
def live_flare():
    """Client for tests that go through a mocked httpx."""
    return Flare(address="http://localhost:3042/")
