"""Result tuples delivered by request tasks.

Each tuple is passed unpacked to the completion callback, so a callback for
``get`` has the signature ``callback(json, response, error)``. ``error`` is None
exactly when the primary fields are populated.
"""

from typing import Any, List, NamedTuple, Optional

import httpx

from buy_client.core.http.exceptions import BuyClientError
from buy_client.core.http.status import Status
from buy_client.pydantic_models.customer.customer_model import Customer
from buy_client.pydantic_models.order.order_model import Order


class TransportResult(NamedTuple):
    json: Any
    response: Optional[httpx.Response]
    error: Optional[BuyClientError]


class CustomerResult(NamedTuple):
    customer: Optional[Customer]
    error: Optional[BuyClientError]


class CustomerTokenResult(NamedTuple):
    customer: Optional[Customer]
    token: Optional[str]
    error: Optional[BuyClientError]


class TokenResult(NamedTuple):
    token: Optional[str]
    error: Optional[BuyClientError]


class StatusResult(NamedTuple):
    status: Status
    error: Optional[BuyClientError]


class OrdersResult(NamedTuple):
    orders: Optional[List[Order]]
    error: Optional[BuyClientError]
