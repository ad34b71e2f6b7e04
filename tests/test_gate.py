from datetime import timedelta

from flask_jwt_extended import create_access_token

from outtie.extensions import db
from outtie.models.user import User


def test_missing_token_is_unauthenticated(client):
    resp = client.get("/api/items")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthenticated"


def test_malformed_header_is_unauthenticated(client):
    resp = client.get("/api/items", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthenticated"


def test_forged_token_is_invalid_credential(client):
    resp = client.get("/api/items", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "InvalidCredential"


def test_expired_token_is_invalid_credential(app, client, lender):
    with app.app_context():
        token = create_access_token(identity=str(lender), expires_delta=timedelta(seconds=-10))
    resp = client.get("/api/items", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "InvalidCredential"


def test_token_for_deleted_user_is_invalid_credential(app, client, lender, headers_for):
    headers = headers_for(lender)
    with app.app_context():
        db.session.delete(db.session.get(User, lender))
        db.session.commit()
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "InvalidCredential"


def test_pending_user_may_browse_but_not_list(client, make_user, headers_for):
    pending = make_user(status="pending")
    headers = headers_for(pending)

    assert client.get("/api/items", headers=headers).status_code == 200

    resp = client.post("/api/items", json={}, headers=headers)
    assert resp.status_code == 403
    body = resp.get_json()
    assert body["error"] == "Forbidden"
    assert body["reason"] == "unverified"
    assert body["verification_status"] == "pending"


def test_verification_status_is_read_per_request(app, client, lender, headers_for):
    headers = headers_for(lender)
    assert client.get("/api/items/my-items", headers=headers).status_code == 200

    with app.app_context():
        db.session.get(User, lender).verification_status = "rejected"
        db.session.commit()

    resp = client.get("/api/items/my-items", headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()["verification_status"] == "rejected"


def test_unknown_route_returns_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_health_needs_no_token(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
