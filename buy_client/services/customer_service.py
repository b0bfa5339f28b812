from typing import Any, Callable, Optional

from pydantic import ValidationError

from buy_client.core.http.client import CUSTOMER_ACCESS_TOKEN_HEADER, HTTPClient
from buy_client.core.http.exceptions import (
    MalformedResponseError,
    TokenDerivationError,
)
from buy_client.core.http.status import status_for_status_code
from buy_client.core.http.task import RequestTask
from buy_client.core.logging import get_logger
from buy_client.pydantic_models.customer.credentials_model import (
    EMAIL,
    FIRST_NAME,
    LAST_NAME,
    PASSWORD,
    PASSWORD_CONFIRMATION,
    AccountCredentials,
)
from buy_client.pydantic_models.customer.customer_model import Customer
from buy_client.pydantic_models.customer.token_model import CustomerToken
from buy_client.pydantic_models.order.order_model import Order
from buy_client.pydantic_models.results import (
    CustomerResult,
    CustomerTokenResult,
    OrdersResult,
    StatusResult,
    TokenResult,
    TransportResult,
)
from buy_client.utils import urls

logger = get_logger(__name__)

Callback = Optional[Callable[..., Any]]


def _require_value(name: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{name} is required")
    return str(value).strip()


def _malformed(result: TransportResult, reason: str) -> MalformedResponseError:
    return MalformedResponseError(
        message=reason,
        url=str(result.response.url) if result.response is not None else None,
        status_code=result.response.status_code if result.response is not None else None,
        json=result.json
    )


def _parse_customer(result: TransportResult) -> Customer:
    data = result.json.get("customer") if isinstance(result.json, dict) else None
    if not isinstance(data, dict):
        raise _malformed(result, "Response has no customer object")
    try:
        return Customer.model_validate(data)
    except ValidationError as e:
        raise _malformed(result, f"Invalid customer object: {e}")


def _parse_token(result: TransportResult) -> CustomerToken:
    data = result.json.get("customer_access_token") if isinstance(result.json, dict) else None
    if not isinstance(data, dict):
        raise _malformed(result, "Response has no customer_access_token object")
    try:
        return CustomerToken.model_validate(data)
    except ValidationError as e:
        raise _malformed(result, f"Invalid customer_access_token object: {e}")


class CustomerService:
    """
    Customer identity operations: account creation, login, password
    recovery and reset, activation, token renewal and order history.

    Every operation returns a RequestTask immediately. Await it or pass a
    callback; the callback receives the result tuple unpacked, e.g.
    ``callback(customer, token, error)``. Bad arguments (missing credential
    items, empty IDs) raise before anything is sent.

    Args:
        client: Transport shared with other services
    """

    def __init__(self, client: HTTPClient):
        self.client = client

    def _url(self, build: Callable[..., str], *args: str) -> str:
        return build(self.client.shop_domain, *args, scheme=self.client.scheme)

    def get_customer(self, customer_id: str, callback: Callback = None) -> RequestTask[CustomerResult]:
        """GET /api/customers/:customer_id, using the client's customer token."""
        customer_id = _require_value("customer_id", customer_id)
        return RequestTask(
            self._get_customer(self._url(urls.customer_url, customer_id)),
            failure=lambda error: CustomerResult(None, error),
            callback=callback,
            description="get customer"
        )

    def create_customer(
        self,
        credentials: AccountCredentials,
        callback: Callback = None
    ) -> RequestTask[CustomerTokenResult]:
        """
        POST /api/customers, then log the new customer in.

        Expects first name, last name, email, password and password confirmation.
        If the account is created but login fails, the error is a
        TokenDerivationError whose ``customer`` is the created account.
        """
        credentials.require(FIRST_NAME, LAST_NAME, EMAIL, PASSWORD, PASSWORD_CONFIRMATION)
        return RequestTask(
            self._create_customer(self._url(urls.customers_url), credentials),
            failure=lambda error: CustomerTokenResult(None, None, error),
            callback=callback,
            description="create customer"
        )

    def login_customer(
        self,
        credentials: AccountCredentials,
        callback: Callback = None
    ) -> RequestTask[CustomerTokenResult]:
        """POST /api/customers/customer_token. Expects email and password."""
        credentials.require(EMAIL, PASSWORD)
        return RequestTask(
            self._login(self._url(urls.customer_token_url), credentials),
            failure=lambda error: CustomerTokenResult(None, None, error),
            callback=callback,
            description="login customer"
        )

    def recover_password(self, email: str, callback: Callback = None) -> RequestTask[StatusResult]:
        """POST /api/customers/recover. Sends a password reset email."""
        email = _require_value("email", email)
        return RequestTask(
            self._recover_password(self._url(urls.customer_recover_url), email),
            failure=lambda error: StatusResult(status_for_status_code(error.status_code, error), error),
            callback=callback,
            description="recover password"
        )

    def renew_customer_token(self, customer_id: str, callback: Callback = None) -> RequestTask[TokenResult]:
        """PUT /api/customers/:customer_id/customer_token/renew, using the client's customer token."""
        customer_id = _require_value("customer_id", customer_id)
        return RequestTask(
            self._renew_token(self._url(urls.customer_token_renew_url, customer_id)),
            failure=lambda error: TokenResult(None, error),
            callback=callback,
            description="renew customer token"
        )

    def activate_customer(
        self,
        credentials: AccountCredentials,
        customer_id: str,
        customer_token: str,
        callback: Callback = None
    ) -> RequestTask[CustomerTokenResult]:
        """
        PUT /api/customers/:customer_id/activate, then log the customer in.

        Args:
            credentials: Password and password confirmation
            customer_id: ID of the customer being activated
            customer_token: Token contained in the activation URL
        """
        credentials.require(PASSWORD, PASSWORD_CONFIRMATION)
        url = self._url(
            urls.customer_activate_url,
            _require_value("customer_id", customer_id),
            _require_value("customer_token", customer_token)
        )
        return RequestTask(
            self._put_then_login(url, credentials, "activated"),
            failure=lambda error: CustomerTokenResult(None, None, error),
            callback=callback,
            description="activate customer"
        )

    def reset_password(
        self,
        credentials: AccountCredentials,
        customer_id: str,
        customer_token: str,
        callback: Callback = None
    ) -> RequestTask[CustomerTokenResult]:
        """
        PUT /api/customers/:customer_id/reset, then log the customer in.

        Args:
            credentials: Password and password confirmation
            customer_id: ID of the customer resetting the password
            customer_token: Token contained in the reset URL
        """
        credentials.require(PASSWORD, PASSWORD_CONFIRMATION)
        url = self._url(
            urls.customer_reset_url,
            _require_value("customer_id", customer_id),
            _require_value("customer_token", customer_token)
        )
        return RequestTask(
            self._put_then_login(url, credentials, "reset"),
            failure=lambda error: CustomerTokenResult(None, None, error),
            callback=callback,
            description="reset password"
        )

    def get_orders_for_customer(self, customer_id: str, callback: Callback = None) -> RequestTask[OrdersResult]:
        """GET /api/customers/:customer_id/orders, using the client's customer token."""
        customer_id = _require_value("customer_id", customer_id)
        return RequestTask(
            self._get_orders(self._url(urls.customer_orders_url, customer_id)),
            failure=lambda error: OrdersResult(None, error),
            callback=callback,
            description="get orders"
        )

    async def _get_customer(self, url: str, token: Optional[str] = None) -> CustomerResult:
        headers = {CUSTOMER_ACCESS_TOKEN_HEADER: token} if token else None
        result = await self.client.get(url, headers=headers)
        if result.error is not None:
            return CustomerResult(None, result.error)
        try:
            return CustomerResult(_parse_customer(result), None)
        except MalformedResponseError as e:
            return CustomerResult(None, e)

    async def _login(self, url: str, credentials: AccountCredentials) -> CustomerTokenResult:
        result = await self.client.post(url, credentials)
        if result.error is not None:
            return CustomerTokenResult(None, None, result.error)

        try:
            token = _parse_token(result)
            if isinstance(result.json.get("customer"), dict):
                return CustomerTokenResult(_parse_customer(result), token.access_token, None)
        except MalformedResponseError as e:
            return CustomerTokenResult(None, None, e)

        if token.customer_id is None:
            return CustomerTokenResult(None, None, _malformed(result, "Token response has no customer_id"))

        # the new token goes on this request only, the client's own token is left alone
        customer, error = await self._get_customer(
            self._url(urls.customer_url, str(token.customer_id)),
            token=token.access_token
        )
        if error is not None:
            return CustomerTokenResult(None, None, error)

        logger.info(f"Customer {customer.id} logged in")
        return CustomerTokenResult(customer, token.access_token, None)

    async def _create_customer(self, url: str, credentials: AccountCredentials) -> CustomerTokenResult:
        result = await self.client.post(url, credentials)
        if result.error is not None:
            return CustomerTokenResult(None, None, result.error)
        try:
            customer = _parse_customer(result)
        except MalformedResponseError as e:
            return CustomerTokenResult(None, None, e)

        logger.info(f"Customer {customer.id} created, logging in")
        return await self._derive_token(customer, credentials.get(EMAIL), credentials.get(PASSWORD), "created")

    async def _put_then_login(self, url: str, credentials: AccountCredentials, action: str) -> CustomerTokenResult:
        result = await self.client.put(url, credentials)
        if result.error is not None:
            return CustomerTokenResult(None, None, result.error)
        try:
            customer = _parse_customer(result)
        except MalformedResponseError as e:
            return CustomerTokenResult(None, None, e)

        logger.info(f"Customer {customer.id} {action}, logging in")
        return await self._derive_token(
            customer,
            customer.email or credentials.get(EMAIL),
            credentials.get(PASSWORD),
            action
        )

    async def _derive_token(
        self,
        customer: Customer,
        email: Optional[str],
        password: str,
        action: str
    ) -> CustomerTokenResult:
        """Log in right after a write that changed the account; failures keep the customer."""
        if not email:
            return CustomerTokenResult(None, None, TokenDerivationError(
                message=f"Customer {customer.id} was {action} but has no email to log in with",
                customer=customer
            ))

        login_credentials = AccountCredentials.from_items(email=email, password=password)
        login_customer, token, error = await self._login(
            self._url(urls.customer_token_url),
            login_credentials
        )
        if error is not None:
            logger.warning(f"Customer {customer.id} was {action} but login failed: {error.message}")
            return CustomerTokenResult(None, None, TokenDerivationError(
                message=f"Customer {customer.id} was {action} but login failed: {error.message}",
                customer=customer,
                url=error.url,
                status_code=error.status_code,
                original_error=error,
                json=error.json
            ))
        return CustomerTokenResult(login_customer or customer, token, None)

    async def _recover_password(self, url: str, email: str) -> StatusResult:
        result = await self.client.post(url, {"email": email})
        status_code = result.response.status_code if result.response is not None else None
        return StatusResult(status_for_status_code(status_code, result.error), result.error)

    async def _renew_token(self, url: str) -> TokenResult:
        result = await self.client.put(url)
        if result.error is not None:
            return TokenResult(None, result.error)
        try:
            return TokenResult(_parse_token(result).access_token, None)
        except MalformedResponseError as e:
            return TokenResult(None, e)

    async def _get_orders(self, url: str) -> OrdersResult:
        result = await self.client.get(url)
        if result.error is not None:
            return OrdersResult(None, result.error)

        data = result.json.get("orders") if isinstance(result.json, dict) else None
        if not isinstance(data, list):
            return OrdersResult(None, _malformed(result, "Response has no orders list"))
        try:
            return OrdersResult([Order.model_validate(order) for order in data], None)
        except ValidationError as e:
            return OrdersResult(None, _malformed(result, f"Invalid order object: {e}"))
