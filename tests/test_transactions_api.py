import json

import httpx

from ppob_api.models.transaction import Transaction


def test_order_requires_authentication(client, product):
    resp = client.post("/transactions/order", json={"productId": product.id, "customerNo": "0812"})
    assert resp.status_code == 401


def test_order_happy_path(client, db, provider, user, product, auth_header):
    stub_payload = {"data": {"status": "SUCCESS", "sn": "SN-77", "message": "Transaksi Sukses"}}
    provider.place_order.return_value = stub_payload

    resp = client.post(
        "/transactions/order",
        json={"productId": product.id, "customerNo": "08123456789"},
        headers=auth_header(user),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Order processed"
    assert body["digiflazzResponse"] == stub_payload
    assert body["transaction"]["status"] == "SUCCESS"

    db.expire_all()
    trx = db.query(Transaction).one()
    assert trx.user_id == user.id
    assert trx.status == "SUCCESS"
    assert json.loads(trx.raw_response) == stub_payload


def test_order_by_sku(client, provider, user, product, auth_header):
    resp = client.post(
        "/transactions/order",
        json={"buyerSkuCode": "TS10", "customerNo": "0812"},
        headers=auth_header(user),
    )
    assert resp.status_code == 200
    sku, customer_no, ref_id = provider.place_order.await_args.args
    assert (sku, customer_no) == ("TS10", "0812")
    assert ref_id.startswith("trx_")


def test_order_provider_failure_is_500(client, db, provider, user, product, auth_header):
    provider.place_order.side_effect = httpx.ConnectError("unreachable")

    resp = client.post(
        "/transactions/order",
        json={"productId": product.id, "customerNo": "0812"},
        headers=auth_header(user),
    )

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Failed to order product"}

    db.expire_all()
    trx = db.query(Transaction).one()
    assert trx.status == "FAILED"
    assert trx.raw_response is None


def test_order_unknown_product_is_404(client, db, user, auth_header):
    resp = client.post(
        "/transactions/order",
        json={"productId": 999, "customerNo": "0812"},
        headers=auth_header(user),
    )
    assert resp.status_code == 404
    assert db.query(Transaction).count() == 0


def test_order_then_webhook_settles(client, db, provider, user, product, auth_header):
    provider.place_order.return_value = {"data": {"status": "Pending"}}
    order = client.post(
        "/transactions/order",
        json={"productId": product.id, "customerNo": "0812"},
        headers=auth_header(user),
    ).json()
    ref_id = order["transaction"]["refId"]
    assert order["transaction"]["status"] == "PENDING"

    hook = client.post("/api/digiflazz/webhook", json={"data": {"ref_id": ref_id, "status": "Sukses", "sn": "SN9"}})
    assert hook.status_code == 200

    db.expire_all()
    trx = db.query(Transaction).filter(Transaction.ref_id == ref_id).one()
    assert (trx.status, trx.sn) == ("SUKSES", "SN9")


def test_listing_is_scoped_to_caller(client, db, make_user, user, admin, product, auth_header):
    other = make_user("joko")
    db.add_all([
        Transaction(ref_id="trx_a", user_id=user.id, product_id=product.id, status="PENDING"),
        Transaction(ref_id="trx_b", user_id=other.id, product_id=product.id, status="SUKSES"),
    ])
    db.commit()

    mine = client.get("/transactions/", headers=auth_header(user)).json()
    everything = client.get("/transactions/", headers=auth_header(admin)).json()
    settled = client.get("/transactions/?status=sukses", headers=auth_header(admin)).json()

    assert [t["refId"] for t in mine] == ["trx_a"]
    assert {t["refId"] for t in everything} == {"trx_a", "trx_b"}
    assert [t["refId"] for t in settled] == ["trx_b"]
    assert mine[0]["product"]["idProvider"] == "TS10"


def test_admin_create_update_delete(client, db, user, admin, product, auth_header):
    created = client.post(
        "/transactions/",
        json={"userId": user.id, "productId": product.id, "customerNo": "0812"},
        headers=auth_header(admin),
    )
    assert created.status_code == 201
    trx_id = created.json()["id"]
    assert created.json()["status"] == "PENDING"

    denied = client.put(f"/transactions/{trx_id}/status", json={"status": "SUCCESS"}, headers=auth_header(user))
    assert denied.status_code == 403

    updated = client.put(f"/transactions/{trx_id}/status", json={"status": "success"}, headers=auth_header(admin))
    assert updated.json()["status"] == "SUCCESS"

    assert client.delete(f"/transactions/{trx_id}", headers=auth_header(user)).status_code == 403
    assert client.delete(f"/transactions/{trx_id}", headers=auth_header(admin)).status_code == 200
    assert client.delete(f"/transactions/{trx_id}", headers=auth_header(admin)).status_code == 404


def test_price_list_passthrough(client, provider, user, auth_header):
    provider.fetch_price_list.return_value = {"data": [{"buyer_sku_code": "TS10"}]}

    assert client.get("/digiflazz/pricelist").status_code == 401
    resp = client.get("/digiflazz/pricelist", headers=auth_header(user))
    assert resp.json() == {"data": [{"buyer_sku_code": "TS10"}]}


def test_price_list_failure_is_500(client, provider, user, auth_header):
    provider.fetch_price_list.side_effect = httpx.ReadTimeout("slow")

    resp = client.get("/digiflazz/pricelist", headers=auth_header(user))
    assert resp.status_code == 500
    assert resp.json()["message"] == "Failed to fetch price list"


def test_balance_is_admin_only(client, provider, user, admin, auth_header):
    provider.fetch_balance.return_value = {"deposit": 50000.0, "checked_at": "2025-01-01T00:00:00"}

    assert client.get("/digiflazz/balance", headers=auth_header(user)).status_code == 403
    assert client.get("/digiflazz/balance", headers=auth_header(admin)).json()["deposit"] == 50000.0
