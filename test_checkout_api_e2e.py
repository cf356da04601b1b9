# test_checkout_api_e2e.py
import httpx


def jprint(step, r):
    """Helper to assert on failure and return the JSON body."""
    assert 200 <= r.status_code < 300, f"{step} -> {r.status_code}: {r.text}"
    return r.json()


def test_healthz_and_catalog(client):
    body = jprint("GET /healthz", client.get("/healthz"))
    assert body["ok"] is True
    assert body["store_backend"] == "memory"
    assert body["payment_gateway_configured"] is False

    products = jprint("GET /catalog/", client.get("/catalog/"))
    assert [p["id"] for p in products] == ["baguette", "croissant", "banh-mi"]
    assert products[0]["image"] == "/images/baguette.png"


def test_full_checkout_with_fallback(client, payment_http, backend_http, fake_sleep):
    # ===== 1. Check-in =====
    r = client.post("/customers/", json={"name": "", "phone": ""})
    cid = jprint("POST /customers/", r)["id"]
    assert r.headers["X-Request-ID"]

    # ===== 2. Open order screen =====
    view = jprint("GET /order/{id}", client.get(f"/order/{cid}"))
    assert view["state"] == "idle" and view["screen"] == "order"
    assert view["total"] == 0.0 and view["can_checkout"] is False
    assert view["checkout_label"] == "Checkout ($0.00)"

    # ===== 3. Pick items =====
    for product_id, delta in (("baguette", 1), ("baguette", 1), ("croissant", 3), ("croissant", -1)):
        view = jprint("POST /order/{id}/quantity", client.post(
            f"/order/{cid}/quantity", json={"product_id": product_id, "delta": delta}))
    assert [l["quantity"] for l in view["lines"]] == [2, 2, 0]
    assert view["total"] == 16.5
    assert view["can_checkout"] is True

    # ===== 4. Checkout; the proxy is down so the fallback pays =====
    payment_http.on("POST", "/api/payment", httpx.ConnectError("proxy offline"))
    view = jprint("POST /order/{id}/checkout", client.post(
        f"/order/{cid}/checkout", json={"name": "Linh", "phone": "0412 345 678"}))
    assert view["state"] == "idle"
    assert view["screen"] == "success"
    assert view["success"] == {"customer_name": "Linh", "customer_phone": "0412 345 678"}
    assert fake_sleep.calls == [1.5, 2.0]

    # ===== 5. Store reflects the sale =====
    rec = jprint("GET /customers/{id}", client.get(f"/customers/{cid}"))
    assert rec["paymentStatus"] == "paid"
    assert rec["paymentId"].startswith("TEST-")
    assert rec["totalAmount"] == 16.5
    assert [(l["id"], l["quantity"]) for l in rec["order"]] == [("baguette", 2), ("croissant", 2)]
    assert len(backend_http.calls("POST", "/api/orders")) == 1

    # ===== 6. Kitchen completes the order =====
    active = jprint("GET /customers/active", client.get("/customers/active"))
    assert [c["id"] for c in active] == [cid]
    jprint("POST /customers/{id}/complete", client.post(f"/customers/{cid}/complete"))
    assert jprint("GET /customers/active", client.get("/customers/active")) == []


def test_checkout_redirect_and_status_poll(client, payment_http):
    cid = jprint("POST /customers/", client.post("/customers/", json={"name": "Tom", "phone": "0400000000"}))["id"]
    view = jprint("GET /order/{id}", client.get(f"/order/{cid}"))
    assert (view["name"], view["phone"]) == ("Tom", "0400000000")

    client.post(f"/order/{cid}/quantity", json={"product_id": "banh-mi", "delta": 4})
    payment_http.on("POST", "/api/payment", httpx.Response(
        200, json={"paymentId": "PAY-77", "redirectUrl": "https://gateway.test/hosted/PAY-77"}))
    payment_http.on("GET", "/api/payment/status", httpx.Response(200, json={"status": "pending"}))

    view = jprint("POST /order/{id}/checkout", client.post(f"/order/{cid}/checkout"))
    assert view["state"] == "redirecting"
    assert view["navigate_to"] == "https://gateway.test/hosted/PAY-77"
    assert view["can_checkout"] is False

    status = jprint("GET /customers/{id}/payment/status", client.get(f"/customers/{cid}/payment/status"))
    assert status == {"status": "pending"}
    # polling does not rewrite the stored status
    assert client.get(f"/customers/{cid}").json()["paymentStatus"] == "paid"


def test_validation_errors_reported_in_view(client, payment_http, backend_http):
    cid = client.post("/customers/", json={}).json()["id"]
    client.post(f"/order/{cid}/quantity", json={"product_id": "croissant", "delta": 1})
    client.put(f"/order/{cid}/contact", json={"name": "", "phone": "123"})

    view = jprint("POST /order/{id}/checkout", client.post(f"/order/{cid}/checkout"))

    assert view["name_error"] == "Please enter your name"
    assert view["phone_error"] == "Please enter a valid 10-digit phone number"
    assert view["state"] == "idle"
    assert payment_http.requests == [] and backend_http.requests == []
    assert client.get(f"/customers/{cid}").json()["order"] == []


def test_unknown_customer_and_product(client):
    assert client.get("/order/nope").status_code == 404
    assert client.get("/customers/nope").status_code == 404
    assert client.post("/customers/nope/complete").status_code == 404
    assert client.put("/customers/nope/contact", json={"name": "a", "phone": "b"}).status_code == 404

    cid = client.post("/customers/", json={}).json()["id"]
    r = client.post(f"/order/{cid}/quantity", json={"product_id": "sourdough", "delta": 1})
    assert r.status_code == 404


def test_delete_customer_is_idempotent(client):
    cid = client.post("/customers/", json={"name": "A", "phone": "0400000001"}).json()["id"]
    client.get(f"/order/{cid}")
    assert jprint("DELETE /customers/{id}", client.delete(f"/customers/{cid}")) == {"message": "deleted"}
    assert client.delete(f"/customers/{cid}").status_code == 200
    assert client.get(f"/order/{cid}").status_code == 404
    assert client.get(f"/customers/{cid}/payment/status").status_code == 404


def test_contact_update_route(client):
    cid = client.post("/customers/", json={}).json()["id"]
    rec = jprint("PUT /customers/{id}/contact", client.put(
        f"/customers/{cid}/contact", json={"name": "Mai", "phone": "0411111111"}))
    assert (rec["name"], rec["phone"]) == ("Mai", "0411111111")
    assert jprint("GET /customers/{id}/payment/status", client.get(f"/customers/{cid}/payment/status")) == {"status": "failed"}
