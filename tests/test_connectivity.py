"""Test cases for the connectivity probe."""

from unittest.mock import AsyncMock

import pytest

from src.playlistcleaner.connectivity import probe
from src.playlistcleaner.errors import ExternalServiceError, RateLimitError


@pytest.mark.anyio
async def test_probe_connected():
    api = AsyncMock()
    api.get_current_identity.return_value = {"display_name": "Tester"}

    assert await probe(api) is True


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [
        ExternalServiceError("Invalid access token", status=401),
        RateLimitError(),
        ConnectionError("offline"),
    ],
)
async def test_probe_failure_returns_false(error):
    api = AsyncMock()
    api.get_current_identity.side_effect = error

    assert await probe(api) is False
