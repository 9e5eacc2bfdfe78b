from datetime import datetime

import pytest

from freshharvest.domain.models import ALLOWED_TRANSITIONS, OrderStatus, can_transition
from tests.conftest import order_payload


def stamp(value):
    return datetime.fromisoformat(value).replace(tzinfo=None)


@pytest.fixture
def order(client, buyer_headers, carrots):
    resp = client.post("/orders", json=order_payload((carrots.id, 3)), headers=buyer_headers)
    assert resp.status_code == 201
    return resp.json()


def test_admin_moves_pending_order_to_delivered(client, admin_headers, buyer_headers, order):
    resp = client.patch(f"/orders/{order['id']}", json={"status": "DELIVERED"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "DELIVERED"

    reread = client.get(f"/orders/{order['id']}", headers=buyer_headers).json()
    assert reread["status"] == "DELIVERED"
    assert reread["total_amount"] == order["total_amount"]
    assert reread["items"] == order["items"]
    assert stamp(reread["updated_at"]) > stamp(order["updated_at"])


def test_put_and_patch_behave_the_same(client, admin_headers, order):
    resp = client.put(f"/orders/{order['id']}", json={"status": "IN_PROGRESS"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"


def test_admin_can_move_status_backwards(client, admin_headers, order):
    for status in ("DELIVERED", "PENDING", "IN_PROGRESS"):
        resp = client.patch(f"/orders/{order['id']}", json={"status": status}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == status


def test_owner_cannot_change_status(client, buyer_headers, admin_headers, order):
    resp = client.patch(f"/orders/{order['id']}", json={"status": "DELIVERED"}, headers=buyer_headers)
    assert resp.status_code == 403
    reread = client.get(f"/orders/{order['id']}", headers=admin_headers).json()
    assert reread["status"] == "PENDING"


def test_anonymous_cannot_change_status(client, order):
    resp = client.patch(f"/orders/{order['id']}", json={"status": "DELIVERED"})
    assert resp.status_code == 401


def test_unknown_status_is_rejected(client, admin_headers, order):
    resp = client.patch(f"/orders/{order['id']}", json={"status": "CANCELLED"}, headers=admin_headers)
    assert resp.status_code == 400
    assert "status" in resp.json()["message"]


def test_status_change_on_missing_order(client, admin_headers):
    resp = client.patch("/orders/999", json={"status": "DELIVERED"}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Order not found"}


def test_delete_order_is_not_supported(client, admin_headers, order):
    resp = client.delete(f"/orders/{order['id']}", headers=admin_headers)
    assert resp.status_code == 405
    assert resp.json() == {"message": "Method not allowed"}


def test_transition_table_allows_every_jump():
    for current in OrderStatus:
        assert ALLOWED_TRANSITIONS[current] == frozenset(OrderStatus)
        for target in OrderStatus:
            assert can_transition(current, target)
