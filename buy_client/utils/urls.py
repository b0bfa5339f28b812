"""Endpoint builders for the customer API, all rooted under ``/api``."""

from urllib.parse import quote, urlencode


def build_api_url(shop_domain: str, *segments, scheme: str = "https", **params) -> str:
    """
    Build an API URL for a shop.

    Args:
        shop_domain: Shop host, e.g. "my-shop.myshopify.com"
        *segments: Path segments below /api; each one is percent-encoded
        scheme: URL scheme (default: https)
        **params: Query parameters; None values are dropped

    Returns:
        Absolute URL string

    Example:
        >>> build_api_url("shop.example.com", "customers", 42, "activate", token="abc")
        'https://shop.example.com/api/customers/42/activate?token=abc'
    """
    if not shop_domain:
        raise ValueError("shop_domain is required to build an API URL")

    host = shop_domain.strip().rstrip("/")
    if "://" in host:
        host = host.split("://", 1)[1]

    path = "/".join(quote(str(segment), safe="") for segment in ("api",) + segments)
    url = f"{scheme}://{host}/{path}"

    query = {key: value for key, value in params.items() if value is not None}
    if query:
        url = f"{url}?{urlencode(query)}"
    return url


def customers_url(shop_domain: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", **kwargs)


def customer_url(shop_domain: str, customer_id: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", customer_id, **kwargs)


def customer_token_url(shop_domain: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", "customer_token", **kwargs)


def customer_recover_url(shop_domain: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", "recover", **kwargs)


def customer_token_renew_url(shop_domain: str, customer_id: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", customer_id, "customer_token", "renew", **kwargs)


def customer_activate_url(shop_domain: str, customer_id: str, token: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", customer_id, "activate", token=token, **kwargs)


def customer_reset_url(shop_domain: str, customer_id: str, token: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", customer_id, "reset", token=token, **kwargs)


def customer_orders_url(shop_domain: str, customer_id: str, **kwargs) -> str:
    return build_api_url(shop_domain, "customers", customer_id, "orders", **kwargs)
