"""
Shared fixtures: an in-memory CRM API behind httpx.MockTransport and a
TestClient wired to it
"""

import asyncio
import copy
import json
import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import httpx
import pytest
from fastapi.testclient import TestClient

from app.auth.auth_handler import get_session
from app.schemas.user import UserProfile
from app.services.crm_api import CrmApiClient, get_api_client
from app.services.session_store import ProfileStore, SessionContext
from main import app

CRM_BASE_URL = "http://crm.test/api"

CLIENTS = [
    {"id": 1, "companyName": "Acme Co", "contactName": "Wile Coyote", "email": "wile@acme.test",
     "phone": "555-0100", "createdAt": "2026-01-10T09:00:00Z"},
    {"id": 2, "companyName": "Zenith Ltd", "contactName": "Zed Zimmer", "email": "zed@zenith.test"},
    {"id": 3, "companyName": "Globex", "contactName": "Hank Scorpio"},
]

ORDERS = [
    {"id": 101, "clientId": 1, "orderNumber": "ORD-20261001-000101", "orderDate": "2026-10-01T00:00:00Z",
     "dueDate": "2026-10-20T00:00:00Z", "status": "New", "paymentStatus": "Unpaid", "totalAmount": 100,
     "orderItems": [
         {"id": 1, "productId": 1, "quantity": 2, "unitPrice": 25},
         {"id": 2, "productId": 2, "quantity": 1, "unitPrice": 50},
     ]},
    {"id": 102, "clientId": "1", "orderNumber": "ORD-20260915-000102", "orderDate": "2026-09-15T00:00:00Z",
     "dueDate": "2026-09-30T00:00:00Z", "status": "Completed", "paymentStatus": "Paid", "totalAmount": 40,
     "amountPaid": 40},
    {"id": 103, "clientId": 2, "orderNumber": "ORD-20261005-000103", "orderDate": "2026-10-05T00:00:00Z",
     "dueDate": "2026-11-01T00:00:00Z", "status": "InProgress", "paymentStatus": "Partial", "totalAmount": 55,
     "amountPaid": 20, "items": [{"id": 3, "productId": 1, "quantity": 3, "unitPrice": 20}]},
    {"id": 104, "clientId": 99, "orderNumber": "ORD-20251003-000104", "orderDate": "2025-10-03T00:00:00Z",
     "dueDate": "2025-10-10T00:00:00Z", "status": "Cancelled", "paymentStatus": "Unpaid", "totalAmount": 10},
]

PRODUCTS = [
    {"id": 1, "name": "Widget", "price": 25, "isActive": True},
    {"id": 2, "name": "Gadget", "price": 50, "isActive": True},
    {"id": 3, "name": "Discontinued thing", "price": 5, "isActive": False},
]

USERS = [
    {"id": 1, "email": "ada@example.com", "password": "Secret123!", "firstName": "Ada", "lastName": "Lovelace"},
]

class FakeCrmApi:
    """Just enough of the CRM REST API, including its habit of ignoring ?clientId="""

    def __init__(self):
        self.clients = copy.deepcopy(CLIENTS)
        self.orders = copy.deepcopy(ORDERS)
        self.products = copy.deepcopy(PRODUCTS)
        self.users = copy.deepcopy(USERS)
        self.order_items = []
        self.requests = []
        self.failing = set()
        self.canned = {}

    def last_request(self, method: str, path_prefix: str):
        for method_, path, body in reversed(self.requests):
            if method_ == method and path.startswith(path_prefix):
                return body
        return None

    @staticmethod
    def _find(records, record_id):
        return next((r for r in records if str(r["id"]) == str(record_id)), None)

    def _collection(self, records, parts, method, body, name):
        if len(parts) == 1:
            if method == "GET":
                return httpx.Response(200, json=records)
            if method == "POST":
                record = dict(body, id=max([r["id"] for r in records] + [0]) + 1)
                records.append(record)
                return httpx.Response(201, json=record)
        else:
            record = self._find(records, parts[1])
            if record is None:
                return httpx.Response(404, text=f"{name} not found")
            if method == "GET":
                return httpx.Response(200, json=record)
            if method == "PUT":
                record.update(body)
                return httpx.Response(204)
            if method == "DELETE":
                records.remove(record)
                return httpx.Response(204)
        return httpx.Response(405)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len("/api"):]
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if path in self.failing:
            return httpx.Response(500, text="Internal Server Error")
        if (request.method, path) in self.canned:
            status_code, text = self.canned[(request.method, path)]
            return httpx.Response(status_code, text=text)

        parts = [p for p in path.split("/") if p]
        resource = parts[0]

        if resource == "users" and parts[1:] == ["login"]:
            user = next((u for u in self.users
                         if u["email"] == body["email"] and u["password"] == body["password"]), None)
            if user is None:
                return httpx.Response(401, text="Invalid email or password")
            return httpx.Response(200, json={k: v for k, v in user.items() if k != "password"})
        if resource == "users" and request.method == "POST":
            if any(u["email"] == body["email"] for u in self.users):
                return httpx.Response(400, text="A user with this email already exists")
            user = dict(body, id=len(self.users) + 1)
            self.users.append(user)
            return httpx.Response(201, json={k: v for k, v in user.items() if k != "password"})
        if resource == "clients":
            return self._collection(self.clients, parts, request.method, body, "Client")
        if resource == "orders" and len(parts) == 3 and parts[2] == "items":
            order = self._find(self.orders, parts[1])
            if order is None:
                return httpx.Response(404, text="Order not found")
            return httpx.Response(200, json=order.get("orderItems") or order.get("items") or [])
        if resource == "orders":
            return self._collection(self.orders, parts, request.method, body, "Order")
        if resource == "orderitems":
            return self._collection(self.order_items, parts, request.method, body, "Order item")
        if resource == "products":
            return self._collection(self.products, parts, request.method, body, "Product")
        return httpx.Response(404, text="Not found")

@pytest.fixture
def fake_crm():
    return FakeCrmApi()

@pytest.fixture
def api_client(fake_crm):
    api = CrmApiClient(base_url=CRM_BASE_URL, transport=httpx.MockTransport(fake_crm.handle))
    yield api
    asyncio.run(api.aclose())

@pytest.fixture
def session(tmp_path):
    context = SessionContext(ProfileStore(str(tmp_path / "session.json")))
    context.initialize()
    return context

@pytest.fixture
def logged_in(session):
    session.login(UserProfile(id=1, email="ada@example.com", first_name="Ada", last_name="Lovelace"))
    return session

@pytest.fixture
def client(api_client, session):
    app.dependency_overrides[get_api_client] = lambda: api_client
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()
