import os
from dotenv import load_dotenv
from pathlib import Path

# load .env at import time from project root
# Path(__file__) is buy_client/core/config.py, so we go up 2 levels to reach project root
project_root = Path(__file__).parent.parent.parent
load_dotenv(dotenv_path=project_root / ".env")

# Shop the client talks to, e.g. "my-shop.myshopify.com"
SHOP_DOMAIN = os.getenv("SHOP_DOMAIN")

# Storefront channel credentials
SHOPIFY_API_KEY = os.getenv("SHOPIFY_API_KEY")
SHOPIFY_APP_ID = os.getenv("SHOPIFY_APP_ID")

# Transport
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30.0"))
USER_AGENT = os.getenv("USER_AGENT", "buy-client-python/1.0.0")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_config():
    """Validate that required environment variables are set."""
    required_vars = [
        ("SHOP_DOMAIN", SHOP_DOMAIN),
    ]

    missing_vars = [name for name, value in required_vars if not value]

    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_vars)}\n"
            "Please check your .env file and ensure all required variables are set."
        )
