import json
import os
import uuid

import httpx
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL

from app.core import db as db_module  # noqa: E402
from app.api.v1.deps import get_vapi_client  # noqa: E402
from app.main import app  # noqa: E402
from app.services.vapi_client import VapiClient  # noqa: E402

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


class FakeVapi:
    """
    In-memory stand-in for the Vapi.ai assistant API, served through
    httpx.MockTransport so the real VapiClient code path is exercised.
    """

    def __init__(self):
        self.assistants: dict[str, dict] = {}
        self.requests: list[tuple[str, str, dict | None]] = []
        self.auth_headers: list[str] = []
        self.fail_status: int | None = None  # every call answers with this status when set
        self.fail_methods: set[str] = set()  # restrict fail_status to these methods

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        self.auth_headers.append(request.headers.get("authorization", ""))

        if self.fail_status and (not self.fail_methods or request.method in self.fail_methods):
            return httpx.Response(self.fail_status, json={"message": "provider error"})

        path = request.url.path
        if request.method == "POST" and path == "/assistant":
            external_id = f"asst_{uuid.uuid4().hex[:12]}"
            doc = {"id": external_id, **body}
            self.assistants[external_id] = doc
            return httpx.Response(201, json=doc)

        external_id = path.rsplit("/", 1)[-1]
        doc = self.assistants.get(external_id)
        if doc is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "PATCH":
            doc.update(body or {})
            return httpx.Response(200, json=doc)
        if request.method == "DELETE":
            return httpx.Response(200, json=self.assistants.pop(external_id))
        return httpx.Response(200, json=doc)

    def calls(self, method: str) -> list[tuple[str, str, dict | None]]:
        return [r for r in self.requests if r[0] == method]

    def client(self) -> VapiClient:
        return VapiClient(
            api_key="test-vapi-key",
            base_url="https://vapi.test",
            transport=httpx.MockTransport(self.handler),
        )


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def fake_vapi():
    """
    Route the app's provider dependency to a FakeVapi for the duration of a test.
    """
    fake = FakeVapi()
    vapi = fake.client()
    app.dependency_overrides[get_vapi_client] = lambda: vapi
    yield fake
    app.dependency_overrides.pop(get_vapi_client, None)


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Register a fresh account through the API and return its Authorization header.
    """

    async def _get_headers(email: str | None = None, password: str = "secret1") -> dict[str, str]:
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        resp = await client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        token = resp.json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
