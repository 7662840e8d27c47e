import asyncio
import copy

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from data.models import Order
from data.store import OrderStoreClient


def make_doc(order_id, created_at, status="Pending", payment="Nan", **extra):
    doc = {
        "_id": order_id,
        "name": f"Student {order_id}",
        "rollNo": "21CS001",
        "contact": "9876543210",
        "location": "Hostel A",
        "totalAmount": 120,
        "items": [{"name": "Litti Chokha", "quantity": 2}],
        "status": status,
        "payment": payment,
        "createdAt": created_at,
    }
    doc.update(extra)
    return doc


def make_order(order_id, created_at, **extra) -> Order:
    return Order.model_validate(make_doc(order_id, created_at, **extra))


class FakeOrderStore:
    """In-memory order backend served over HTTP with aiohttp.web."""

    def __init__(self, docs):
        self.docs = {d.get("_id", f"#{i}"): copy.deepcopy(d) for i, d in enumerate(docs)}
        self.puts = []
        self.fail_gets = False
        self.app = web.Application()
        self.app.router.add_get("/getorders", self.list_orders)
        self.app.router.add_put("/getorders/{order_id}", self.update_order)

    async def list_orders(self, request):
        if self.fail_gets:
            return web.json_response({"error": "boom"}, status=500)
        return web.json_response(list(self.docs.values()))

    async def update_order(self, request):
        order_id = request.match_info["order_id"]
        body = await request.json()
        self.puts.append((order_id, body))
        if order_id not in self.docs:
            return web.json_response({"message": "Order not found"}, status=404)
        self.docs[order_id].update(body)
        return web.json_response(self.docs[order_id])


@pytest.fixture
def sample_docs():
    return [
        make_doc("A", "2024-01-01T10:00:00.000Z"),
        make_doc("B", "2024-01-01T09:00:00.000Z", status="Delivered", payment="Gpay"),
        make_doc("C", "2024-01-02T08:30:00.000Z", payment="COD"),
    ]


@pytest.fixture
def run_with_store():
    """Run `scenario(client, fake)` against a live fake store."""

    def runner(fake: FakeOrderStore, scenario):
        async def main():
            async with TestServer(fake.app) as server:
                base_url = f"http://{server.host}:{server.port}"
                async with OrderStoreClient(base_url=base_url) as client:
                    return await scenario(client, fake)

        return asyncio.run(main())

    return runner
