NEW_PRODUCT = {
    "idProvider": "TS20",
    "name": "Pulsa Telkomsel 20.000",
    "category": "PULSA",
    "base_price": 20000,
    "selling_price": 21500,
}


# ==================== PRODUCTS ====================

def test_product_profit_computed_on_create(client, admin, auth_header):
    resp = client.post("/products/", json=NEW_PRODUCT, headers=auth_header(admin))

    assert resp.status_code == 201
    assert resp.json()["profit"] == 1500
    assert resp.json()["idProvider"] == "TS20"


def test_product_writes_are_admin_only(client, user, auth_header):
    assert client.post("/products/", json=NEW_PRODUCT).status_code == 401
    assert client.post("/products/", json=NEW_PRODUCT, headers=auth_header(user)).status_code == 403


def test_product_create_validation(client, admin, auth_header):
    resp = client.post("/products/", json={"name": "x"}, headers=auth_header(admin))
    assert resp.status_code == 400


def test_duplicate_sku_is_409(client, admin, product, auth_header):
    resp = client.post("/products/", json={**NEW_PRODUCT, "idProvider": "TS10"}, headers=auth_header(admin))
    assert resp.status_code == 409


def test_product_read(client, product):
    assert [p["id"] for p in client.get("/products/").json()] == [product.id]
    assert client.get(f"/products/{product.id}").json()["name"] == "Pulsa Telkomsel 10.000"
    assert client.get("/products/999").status_code == 404


def test_profit_only_recomputed_with_both_prices(client, admin, product, auth_header):
    one_side = client.put(f"/products/{product.id}", json={"selling_price": 12000}, headers=auth_header(admin))
    assert one_side.json()["selling_price"] == 12000
    assert one_side.json()["profit"] == 1500

    both = client.put(
        f"/products/{product.id}",
        json={"base_price": 10500, "selling_price": 12000},
        headers=auth_header(admin),
    )
    assert both.json()["profit"] == 1500
    assert both.json()["base_price"] == 10500


def test_empty_product_update_is_400(client, admin, product, auth_header):
    assert client.put(f"/products/{product.id}", json={}, headers=auth_header(admin)).status_code == 400


def test_product_delete(client, admin, product, auth_header):
    assert client.delete(f"/products/{product.id}", headers=auth_header(admin)).status_code == 200
    assert client.get(f"/products/{product.id}").status_code == 404


# ==================== BRANCH / NASABAH ====================

def test_branch_and_nasabah_lifecycle(client):
    branch = client.post("/api/branch/", json={"name": "Cabang Utama", "address": "Jl. Merdeka No. 12"})
    assert branch.status_code == 201
    branch_id = branch.json()["id"]

    nasabah = client.post("/api/nasabah/", json={"name": "Budi Santoso", "branchId": branch_id, "phone": "0812"})
    assert nasabah.status_code == 201
    assert nasabah.json()["balance"] == 0
    nasabah_id = nasabah.json()["id"]

    listing = client.get(f"/api/branch/{branch_id}/nasabah").json()
    assert listing["branch"] == "Cabang Utama"
    assert listing["totalNasabah"] == 1

    updated = client.put(f"/api/nasabah/{nasabah_id}", json={"balance": 500000})
    assert updated.json()["balance"] == 500000

    detail = client.get(f"/api/nasabah/{nasabah_id}").json()
    assert detail["branch"]["name"] == "Cabang Utama"

    renamed = client.put(f"/api/branch/{branch_id}", json={"name": "Cabang Jakarta"})
    assert renamed.json()["name"] == "Cabang Jakarta"
    assert renamed.json()["address"] == "Jl. Merdeka No. 12"

    assert client.delete(f"/api/nasabah/{nasabah_id}").status_code == 200
    assert client.get(f"/api/nasabah/{nasabah_id}").status_code == 404
    assert client.delete(f"/api/branch/{branch_id}").status_code == 200
    assert client.get(f"/api/branch/{branch_id}").status_code == 404


def test_nasabah_requires_existing_branch(client):
    resp = client.post("/api/nasabah/", json={"name": "Budi", "branchId": 42})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Cabang tidak ditemukan"


def test_nasabah_requires_name_and_branch(client):
    assert client.post("/api/nasabah/", json={"name": "Budi"}).status_code == 400


def test_unknown_branch_nasabah_listing_is_404(client):
    assert client.get("/api/branch/5/nasabah").status_code == 404
