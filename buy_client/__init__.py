"""
Python client for a shop's customer API.

    async with HTTPClient(shop_domain="my-shop.myshopify.com", api_key="...") as client:
        customers = CustomerService(client)
        customer, token, error = await customers.login_customer(
            AccountCredentials.from_items(email="jane@example.com", password="secret")
        )
"""

# the transport package must load before the models that import from it
from buy_client.core.http import (
    CUSTOMER_ACCESS_TOKEN_HEADER,
    BuyClientError,
    CredentialsError,
    ErrorKind,
    HTTPClient,
    RequestTask,
    Status,
)
from buy_client.pydantic_models.customer.credentials_model import AccountCredentials, CredentialItem
from buy_client.pydantic_models.customer.customer_model import Customer
from buy_client.pydantic_models.order.order_model import Order
from buy_client.services.customer_service import CustomerService

__version__ = "1.0.0"

__all__ = [
    "CUSTOMER_ACCESS_TOKEN_HEADER",
    "AccountCredentials",
    "BuyClientError",
    "CredentialItem",
    "CredentialsError",
    "Customer",
    "CustomerService",
    "ErrorKind",
    "HTTPClient",
    "Order",
    "RequestTask",
    "Status",
]
