from typing import Any, Dict, Iterable, Tuple

from pydantic import BaseModel, ConfigDict, Field

from buy_client.core.http.exceptions import CredentialsError


'''Account credentials (Pydantic)'''

EMAIL = "email"
PASSWORD = "password"
PASSWORD_CONFIRMATION = "password_confirmation"
FIRST_NAME = "first_name"
LAST_NAME = "last_name"


class CredentialItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    value: str


class AccountCredentials(BaseModel):
    """
    Immutable bag of credential items sent with customer operations.

    Example:
        >>> credentials = AccountCredentials.from_items(email="a@b.c", password="secret")
        >>> credentials.to_json()
        {'customer': {'email': 'a@b.c', 'password': 'secret'}}
    """

    model_config = ConfigDict(frozen=True)

    items: Tuple[CredentialItem, ...] = ()

    @classmethod
    def from_items(cls, **items: str) -> "AccountCredentials":
        return cls(items=tuple(CredentialItem(key=k, value=v) for k, v in items.items()))

    def credentials_by_adding_items(self, items: Iterable[CredentialItem]) -> "AccountCredentials":
        """Return new credentials with ``items`` merged in; later items replace earlier keys."""
        merged: Dict[str, CredentialItem] = {item.key: item for item in self.items}
        for item in items:
            merged[item.key] = item
        return AccountCredentials(items=tuple(merged.values()))

    def with_items(self, **items: str) -> "AccountCredentials":
        return self.credentials_by_adding_items(
            CredentialItem(key=k, value=v) for k, v in items.items()
        )

    def get(self, key: str, default: Any = None) -> Any:
        for item in self.items:
            if item.key == key:
                return item.value
        return default

    def __contains__(self, key: object) -> bool:
        return any(item.key == key for item in self.items)

    def require(self, *keys: str) -> None:
        """
        Check that every key is present with a non-empty value.

        Raises:
            CredentialsError: Listing all missing keys
        """
        missing = [key for key in keys if not self.get(key)]
        if missing:
            raise CredentialsError(missing)

    def to_json(self) -> Dict[str, Any]:
        return {"customer": {item.key: item.value for item in self.items}}
