"""Root conftest: shared test configuration."""

import os

# Ensure tests never pick up a real shop from the developer's environment
os.environ.setdefault("SHOP_DOMAIN", "test-shop.example.com")

import httpx
import pytest

from buy_client import AccountCredentials, CustomerService, HTTPClient

from tests.factories import SHOP


@pytest.fixture
async def http_client():
    """Transport over a real httpx session so respx can intercept it."""
    async with httpx.AsyncClient() as session:
        yield HTTPClient(shop_domain=SHOP, api_key="test-api-key", app_id="8", http_client=session)


@pytest.fixture
def customer_service(http_client: HTTPClient) -> CustomerService:
    return CustomerService(http_client)


@pytest.fixture
def signup_credentials() -> AccountCredentials:
    return AccountCredentials.from_items(
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        password="hunter22",
        password_confirmation="hunter22",
    )

