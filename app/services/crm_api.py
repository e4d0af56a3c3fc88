"""
HTTP client for the upstream CRM REST API
Every call either returns parsed records or raises BoundaryError
"""

import httpx
from fastapi import Request
import logging
from typing import Any, Optional

from app.config import CRM_API_BASE_URL, CRM_API_TIMEOUT_SECONDS
from app.schemas.client import Client
from app.schemas.order import Order, OrderItem
from app.schemas.product import Product
from app.schemas.user import UserProfile
from app.services.normalizer import normalize_order, normalize_orders
from app.utils.error_handler import BoundaryError

logger = logging.getLogger(__name__)

class CrmApiClient:
    """Thin async wrapper around the CRM API endpoints"""

    def __init__(
        self,
        base_url: str = CRM_API_BASE_URL,
        timeout: float = CRM_API_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        params: Optional[dict] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Perform one call; the response body text becomes the error message on failure"""
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BoundaryError(failure_message, operation=f"{method} {path}", original_error=e)

        if not response.is_success:
            logger.warning(f"{method} {path} returned {response.status_code}")
            raise BoundaryError(
                response.text or failure_message,
                status_code=response.status_code,
                operation=f"{method} {path}",
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned malformed JSON")
            raise BoundaryError(failure_message, status_code=response.status_code,
                                operation=f"{method} {path}", original_error=e)

    @staticmethod
    def _as_list(data: Any, what: str) -> list:
        if isinstance(data, list):
            return data
        logger.warning(f"Expected a list of {what}, got {type(data).__name__}")
        return []

    # Clients

    async def list_clients(self) -> list[Client]:
        data = await self._request("GET", "/clients", "Failed to fetch clients")
        return [Client(**raw) for raw in self._as_list(data, "clients")]

    async def search_clients(self, search_term: str) -> list[Client]:
        data = await self._request("GET", "/clients", "Failed to search clients", params={"search": search_term})
        return [Client(**raw) for raw in self._as_list(data, "clients")]

    async def get_client(self, client_id: int) -> Client:
        data = await self._request("GET", f"/clients/{client_id}", "Failed to fetch client")
        return Client(**data)

    async def create_client(self, client_data: dict) -> Client:
        data = await self._request("POST", "/clients", "Failed to create client", json=client_data)
        return Client(**data)

    async def update_client(self, client_id: int, client_data: dict) -> dict:
        return await self._request("PUT", f"/clients/{client_id}", "Failed to update client", json=client_data)

    async def delete_client(self, client_id: int) -> dict:
        return await self._request("DELETE", f"/clients/{client_id}", "Failed to delete client")

    async def get_client_orders(self, client_id: int) -> list[Order]:
        data = await self._request("GET", f"/clients/{client_id}/orders", "Failed to fetch client orders")
        return normalize_orders(data)

    # Orders

    async def list_orders(self) -> list[Order]:
        data = await self._request("GET", "/orders", "Failed to fetch orders")
        return normalize_orders(data)

    async def search_orders(self, search_term: str) -> list[Order]:
        data = await self._request("GET", "/orders", "Failed to search orders", params={"search": search_term})
        return normalize_orders(data)

    async def list_orders_by_status(self, status: str) -> list[Order]:
        data = await self._request("GET", "/orders", "Failed to fetch orders by status", params={"status": status})
        return normalize_orders(data)

    async def list_orders_by_client(self, client_id: int) -> list[Order]:
        """Orders for a client; the API may not honour the filter, callers re-filter"""
        data = await self._request("GET", "/orders", "Failed to fetch orders by client", params={"clientId": client_id})
        return normalize_orders(data)

    async def get_order(self, order_id: int) -> Order:
        data = await self._request("GET", f"/orders/{order_id}", "Failed to fetch order")
        return normalize_order(data)

    async def create_order(self, order_data: dict) -> Order:
        data = await self._request("POST", "/orders", "Failed to create order", json=order_data)
        return normalize_order(data)

    async def update_order(self, order_id: int, order_data: dict) -> dict:
        return await self._request("PUT", f"/orders/{order_id}", "Failed to update order", json=order_data)

    async def delete_order(self, order_id: int) -> dict:
        return await self._request("DELETE", f"/orders/{order_id}", "Failed to delete order")

    async def get_order_items(self, order_id: int) -> list[OrderItem]:
        data = await self._request("GET", f"/orders/{order_id}/items", "Failed to fetch order items")
        return [OrderItem(**raw) for raw in self._as_list(data, "order items")]

    # Order items

    async def create_order_item(self, item_data: dict) -> OrderItem:
        data = await self._request("POST", "/orderitems", "Failed to create order item", json=item_data)
        return OrderItem(**data)

    async def update_order_item(self, item_id: int, item_data: dict) -> dict:
        return await self._request("PUT", f"/orderitems/{item_id}", "Failed to update order item", json=item_data)

    async def delete_order_item(self, item_id: int) -> dict:
        return await self._request("DELETE", f"/orderitems/{item_id}", "Failed to delete order item")

    # Products

    async def list_products(self) -> list[Product]:
        data = await self._request("GET", "/products", "Failed to fetch products")
        return [Product(**raw) for raw in self._as_list(data, "products")]

    async def list_active_products(self) -> list[Product]:
        data = await self._request("GET", "/products", "Failed to fetch active products", params={"isActive": "true"})
        return [Product(**raw) for raw in self._as_list(data, "products")]

    async def get_product(self, product_id: int) -> Product:
        data = await self._request("GET", f"/products/{product_id}", "Failed to fetch product")
        return Product(**data)

    async def create_product(self, product_data: dict) -> Product:
        data = await self._request("POST", "/products", "Failed to create product", json=product_data)
        return Product(**data)

    async def update_product(self, product_id: int, product_data: dict) -> dict:
        return await self._request("PUT", f"/products/{product_id}", "Failed to update product", json=product_data)

    async def delete_product(self, product_id: int) -> dict:
        return await self._request("DELETE", f"/products/{product_id}", "Failed to delete product")

    # Users

    async def list_users(self) -> list[UserProfile]:
        data = await self._request("GET", "/users", "Failed to fetch users")
        return [UserProfile(**raw) for raw in self._as_list(data, "users")]

    async def search_users_by_name(self, name: str) -> list[UserProfile]:
        data = await self._request("GET", "/users", "Failed to fetch users", params={"name": name})
        return [UserProfile(**raw) for raw in self._as_list(data, "users")]

    async def get_user(self, user_id: int) -> UserProfile:
        data = await self._request("GET", f"/users/{user_id}", "Failed to fetch user")
        return UserProfile(**data)

    async def create_user(self, user_data: dict) -> UserProfile:
        data = await self._request("POST", "/users", "Failed to create user", json=user_data)
        return UserProfile(**data)

    async def update_user(self, user_id: int, user_data: dict) -> dict:
        return await self._request("PUT", f"/users/{user_id}", "Failed to update user", json=user_data)

    async def delete_user(self, user_id: int) -> dict:
        return await self._request("DELETE", f"/users/{user_id}", "Failed to delete user")

    async def login(self, email: str, password: str) -> UserProfile:
        data = await self._request(
            "POST", "/users/login", "Invalid email or password",
            json={"email": email, "password": password},
        )
        return UserProfile(**data)

def get_api_client(request: Request) -> CrmApiClient:
    """Dependency returning the client created in the application lifespan"""
    return request.app.state.api_client
