"""Pytest configuration"""

import pytest


@pytest.fixture
def anyio_backend():
    """Pin anyio to the asyncio backend"""
    return "asyncio"
