"""Where: src/disconnect/features/marketplace.py
What: Listings, orders, order messages, fees, and price suggestions.
Why: Seller-side operations all require the seller's user token.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from disconnect.platform.discogs.auth import LEVEL_USER
from disconnect.util import add_params

from .ports import RequestOptions, RequestPort
from .user import get_inventory


class Marketplace:
    """Marketplace section of a client."""

    def __init__(self, client: RequestPort) -> None:
        self._client: RequestPort = client

    def get_listing(self, listing: int | str) -> Any:
        return self._client.get(f"/marketplace/listings/{listing}")

    def add_listing(self, data: Mapping[str, Any]) -> Any:
        return self._client.post(
            RequestOptions(url="/marketplace/listings", auth_level=LEVEL_USER), dict(data)
        )

    def edit_listing(self, listing: int | str, data: Mapping[str, Any]) -> Any:
        return self._client.post(
            RequestOptions(url=f"/marketplace/listings/{listing}", auth_level=LEVEL_USER),
            dict(data),
        )

    def delete_listing(self, listing: int | str) -> Any:
        return self._client.delete(
            RequestOptions(url=f"/marketplace/listings/{listing}", auth_level=LEVEL_USER)
        )

    def get_orders(self, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(
            RequestOptions(url=add_params("/marketplace/orders", params), auth_level=LEVEL_USER)
        )

    def get_order(self, order: str) -> Any:
        return self._client.get(
            RequestOptions(url=f"/marketplace/orders/{order}", auth_level=LEVEL_USER)
        )

    def edit_order(self, order: str, data: Mapping[str, Any]) -> Any:
        return self._client.post(
            RequestOptions(url=f"/marketplace/orders/{order}", auth_level=LEVEL_USER), dict(data)
        )

    def get_order_messages(self, order: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._client.get(
            RequestOptions(
                url=add_params(f"/marketplace/orders/{order}/messages", params),
                auth_level=LEVEL_USER,
            )
        )

    def add_order_message(self, order: str, data: Mapping[str, Any]) -> Any:
        return self._client.post(
            RequestOptions(url=f"/marketplace/orders/{order}/messages", auth_level=LEVEL_USER),
            dict(data),
        )

    def get_fee(self, price: float | int | str, currency: str | None = None) -> Any:
        """Get the fee for ``price``; currency is one of USD, GBP, EUR, CAD, AUD, JPY."""

        amount = (
            f"{price:.2f}"
            if isinstance(price, (int, float)) and not isinstance(price, bool)
            else str(price)
        )
        path = f"/marketplace/fee/{amount}"
        if currency:
            path = f"{path}/{currency}"
        return self._client.get(path)

    def get_price_suggestions(self, release: int | str) -> Any:
        return self._client.get(
            RequestOptions(url=f"/marketplace/price_suggestions/{release}", auth_level=LEVEL_USER)
        )

    def get_inventory(self, user: str, params: Mapping[str, Any] | None = None) -> Any:
        return get_inventory(self._client, user, params)


__all__ = ["Marketplace"]
