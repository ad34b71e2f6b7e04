import json

from conftest import ITEM_PAYLOAD


def test_create_then_list_my_items_round_trips(client, lender, headers_for, create_item):
    item_id = create_item(lender, contact_preferences=["whatsapp", "phone", "email"])

    resp = client.get("/api/items/my-items", headers=headers_for(lender))
    assert resp.status_code == 200
    items = resp.get_json()["items"]
    assert [i["id"] for i in items] == [item_id]

    item = items[0]
    for key, value in ITEM_PAYLOAD.items():
        if key != "contact_preferences":
            assert item[key] == value, key
    assert item["contact_preferences"] == ["whatsapp", "phone", "email"]
    assert item["status"] == "available"
    assert item["lender_id"] == lender


def test_create_stores_photos_in_order(client, lender, headers_for, create_item):
    create_item(lender, photos=["https://img/1.jpg", "https://img/2.jpg"])
    item = client.get("/api/items/my-items", headers=headers_for(lender)).get_json()["items"][0]
    assert item["photos"] == ["https://img/1.jpg", "https://img/2.jpg"]
    assert item["primary_photo"] == "https://img/1.jpg"


def test_create_lists_every_missing_field(client, lender, headers_for):
    resp = client.post("/api/items", json={"title": "Scarf"}, headers=headers_for(lender))
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "ValidationError"
    assert set(body["fields"]) == {
        "category",
        "size",
        "rental_price_per_week",
        "pickup_location",
        "payment_method",
        "contact_preferences",
    }


def test_create_rejects_bad_values(client, lender, headers_for):
    payload = dict(
        ITEM_PAYLOAD,
        category="hats",
        rental_price_per_week=-3,
        payment_method="venmo",
        contact_preferences=[],
    )
    resp = client.post("/api/items", json=payload, headers=headers_for(lender))
    assert resp.status_code == 400
    assert set(resp.get_json()["fields"]) == {
        "category",
        "rental_price_per_week",
        "payment_method",
        "contact_preferences",
    }


def test_create_rejects_unknown_channel_and_duplicates(client, lender, headers_for):
    for prefs in (["phone", "fax"], ["phone", "phone"], "phone"):
        payload = dict(ITEM_PAYLOAD, contact_preferences=prefs)
        resp = client.post("/api/items", json=payload, headers=headers_for(lender))
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["contact_preferences"]


def test_create_rejects_status_and_unknown_fields(client, lender, headers_for):
    payload = dict(ITEM_PAYLOAD, status="rented", colour="red")
    resp = client.post("/api/items", json=payload, headers=headers_for(lender))
    assert resp.status_code == 400
    assert resp.get_json()["fields"] == ["colour", "status"]


def test_update_partial_fields(client, lender, headers_for, create_item):
    item_id = create_item(lender)
    resp = client.put(
        f"/api/items/{item_id}",
        json={"rental_price_per_week": 20.5, "contact_preferences": ["email", "phone"]},
        headers=headers_for(lender),
    )
    assert resp.status_code == 200

    item = client.get("/api/items/my-items", headers=headers_for(lender)).get_json()["items"][0]
    assert item["rental_price_per_week"] == 20.5
    assert item["contact_preferences"] == ["email", "phone"]
    assert item["title"] == ITEM_PAYLOAD["title"]


def test_update_cannot_touch_status(client, lender, headers_for, create_item, item_status):
    item_id = create_item(lender)
    resp = client.put(f"/api/items/{item_id}", json={"status": "inactive"}, headers=headers_for(lender))
    assert resp.status_code == 400
    assert resp.get_json()["fields"] == ["status"]
    assert item_status(item_id) == "available"


def test_update_rejects_empty_payload(client, lender, headers_for, create_item):
    item_id = create_item(lender)
    resp = client.put(f"/api/items/{item_id}", json={}, headers=headers_for(lender))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ValidationError"


def test_update_missing_and_foreign_items(client, lender, outsider, headers_for, create_item):
    item_id = create_item(lender)

    resp = client.put("/api/items/9999", json={"title": "x"}, headers=headers_for(lender))
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "NotFound"

    resp = client.put(f"/api/items/{item_id}", json={"title": "x"}, headers=headers_for(outsider))
    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "not_owner"


def test_delete_is_owner_only_and_combined_not_found(client, lender, outsider, headers_for, create_item, item_status):
    item_id = create_item(lender)

    resp = client.delete(f"/api/items/{item_id}", headers=headers_for(outsider))
    assert resp.status_code == 404
    assert item_status(item_id) == "available"

    resp = client.delete(f"/api/items/{item_id}", headers=headers_for(lender))
    assert resp.status_code == 200
    assert item_status(item_id) is None


def test_delete_cascades_saved_bookmarks(client, lender, renter, headers_for, create_item):
    item_id = create_item(lender)
    client.post(f"/api/items/{item_id}/save", headers=headers_for(renter))

    client.delete(f"/api/items/{item_id}", headers=headers_for(lender))

    saved = client.get("/api/items/saved", headers=headers_for(renter)).get_json()["items"]
    assert saved == []


def test_rented_item_cannot_be_updated_deleted_or_deactivated(
    client, lender, renter, headers_for, create_item, rent, item_status
):
    item_id = create_item(lender)
    assert rent(lender, item_id, renter).status_code == 200

    headers = headers_for(lender)
    for resp in (
        client.put(f"/api/items/{item_id}", json={"title": "new"}, headers=headers),
        client.delete(f"/api/items/{item_id}", headers=headers),
        client.post(f"/api/items/{item_id}/deactivate", headers=headers),
    ):
        assert resp.status_code == 403
        assert resp.get_json()["reason"] == "item_rented"
    assert item_status(item_id) == "rented"


def test_deactivate_and_reactivate(client, lender, renter, headers_for, create_item, item_status):
    item_id = create_item(lender)

    resp = client.post(f"/api/items/{item_id}/deactivate", headers=headers_for(lender))
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "inactive"
    assert item_status(item_id) == "inactive"

    feed = client.get("/api/items", headers=headers_for(renter)).get_json()["items"]
    assert item_id not in [i["id"] for i in feed]

    resp = client.post(f"/api/items/{item_id}/reactivate", headers=headers_for(lender))
    assert resp.get_json()["status"] == "available"
    assert item_status(item_id) == "available"


def test_feed_excludes_own_and_saved_items_newest_first(client, lender, renter, headers_for, create_item):
    first = create_item(lender, title="First")
    second = create_item(lender, title="Second")
    third = create_item(lender, title="Third")
    own = create_item(renter, title="Mine")

    client.post(f"/api/items/{second}/save", headers=headers_for(renter))

    resp = client.get("/api/items", headers=headers_for(renter))
    assert resp.status_code == 200
    items = resp.get_json()["items"]
    assert [i["id"] for i in items] == [third, first]
    assert own not in [i["id"] for i in items]
    assert items[0]["lender"]["name"] == "Lena Lender"


def test_feed_pagination(client, lender, renter, headers_for, create_item):
    ids = [create_item(lender, title=f"Item {n}") for n in range(5)]
    newest_first = list(reversed(ids))

    page = client.get("/api/items?limit=2&offset=1", headers=headers_for(renter)).get_json()["items"]
    assert [i["id"] for i in page] == newest_first[1:3]


def test_feed_rejects_bad_pagination(client, renter, headers_for):
    for query in ("limit=0", "limit=abc", "offset=-1", "limit=1000"):
        resp = client.get(f"/api/items?{query}", headers=headers_for(renter))
        assert resp.status_code == 400, query


def test_feed_excludes_rented_items(client, lender, renter, outsider, headers_for, create_item, rent):
    item_id = create_item(lender)
    rent(lender, item_id, renter)
    feed = client.get("/api/items", headers=headers_for(outsider)).get_json()["items"]
    assert feed == []


def test_save_is_idempotent_and_unsave(client, lender, renter, headers_for, create_item):
    item_id = create_item(lender)
    headers = headers_for(renter)

    assert client.post(f"/api/items/{item_id}/save", headers=headers).status_code == 200
    assert client.post(f"/api/items/{item_id}/save", headers=headers).status_code == 200

    saved = client.get("/api/items/saved", headers=headers).get_json()["items"]
    assert [s["id"] for s in saved] == [item_id]
    assert saved[0]["lender"]["id"] == lender
    assert saved[0]["saved_at"]

    assert client.delete(f"/api/items/{item_id}/unsave", headers=headers).status_code == 200
    assert client.delete(f"/api/items/{item_id}/unsave", headers=headers).status_code == 200
    assert client.get("/api/items/saved", headers=headers).get_json()["items"] == []


def test_save_unknown_item_is_not_found(client, renter, headers_for):
    resp = client.post("/api/items/424242/save", headers=headers_for(renter))
    assert resp.status_code == 404


def test_price_must_be_a_finite_json_number(client, lender, headers_for):
    raw = json.dumps(dict(ITEM_PAYLOAD, rental_price_per_week=float("inf")))
    assert "Infinity" in raw
    for body in (raw, raw.replace("Infinity", "1e400"), raw.replace("Infinity", "NaN")):
        resp = client.post("/api/items", data=body, content_type="application/json", headers=headers_for(lender))
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["rental_price_per_week"]

    for price in ("1e400", "inf", "15", 10**400):
        payload = dict(ITEM_PAYLOAD, rental_price_per_week=price)
        resp = client.post("/api/items", json=payload, headers=headers_for(lender))
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["rental_price_per_week"]

    assert client.get("/api/items/my-items", headers=headers_for(lender)).get_json()["items"] == []


def test_create_returns_both_id_spellings(client, lender, headers_for):
    resp = client.post("/api/items", json=ITEM_PAYLOAD, headers=headers_for(lender))
    body = resp.get_json()
    assert body["itemId"] == body["item_id"]


def test_out_of_range_item_ids_do_not_route(client, lender, headers_for):
    for item_id in (0, 10**20):
        resp = client.put(f"/api/items/{item_id}", json={"title": "x"}, headers=headers_for(lender))
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "NotFound"
    assert client.get(f"/api/users/{10**20}", headers=headers_for(lender)).status_code == 404
