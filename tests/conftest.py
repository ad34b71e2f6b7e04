import itertools

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from outtie import create_app
from outtie.config import Config
from outtie.extensions import db
from outtie.models.item import Item
from outtie.models.rental import Rental
from outtie.models.user import User

ITEM_PAYLOAD = {
    "title": "Black wool coat",
    "description": "Barely worn",
    "category": "outerwear",
    "size": "M",
    "rental_price_per_week": 15,
    "pickup_location": "Butler Library",
    "must_return_washed": True,
    "payment_method": "zelle",
    "zelle_info": "lender@columbia.edu",
    "contact_preferences": ["phone", "instagram"],
}


class TestConfig(Config):
    __test__ = False

    TESTING = True
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough"
    SCHEDULER_ENABLED = False
    AUTO_CREATE_TABLES = True
    MAIL_SUPPRESS_SEND = True
    INSTITUTION_EMAIL_DOMAIN = "columbia.edu"


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'outtie-test.db'}"

    app = create_app(_Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(status="approved", email=None, name=None, password="secret123"):
        n = next(counter)
        with app.app_context():
            user = User(
                email=email or f"student{n}@columbia.edu",
                password_hash=generate_password_hash(password),
                name=name or f"Student {n}",
                verification_status=status,
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture
def headers_for(app):
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def lender(make_user):
    return make_user(name="Lena Lender")


@pytest.fixture
def renter(make_user):
    return make_user(name="Remy Renter")


@pytest.fixture
def outsider(make_user):
    return make_user(name="Otto Outsider")


@pytest.fixture
def create_item(client, headers_for):
    def _create(user_id, **overrides):
        payload = dict(ITEM_PAYLOAD, **overrides)
        resp = client.post("/api/items", json=payload, headers=headers_for(user_id))
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["item_id"]

    return _create


@pytest.fixture
def item_status(app):
    def _status(item_id):
        with app.app_context():
            item = db.session.get(Item, item_id)
            return item.status if item else None

    return _status


@pytest.fixture
def active_rentals(app):
    def _count(item_id):
        with app.app_context():
            return db.session.query(Rental).filter_by(item_id=item_id, status="active").count()

    return _count


@pytest.fixture
def rent(client, headers_for):
    def _rent(lender_id, item_id, renter_id, **extra):
        body = {"item_id": item_id, "renter_id": renter_id, **extra}
        return client.post("/api/rentals/mark-rented", json=body, headers=headers_for(lender_id))

    return _rent


@pytest.fixture
def give_back(client, headers_for):
    def _return(lender_id, rental_id):
        return client.post("/api/rentals/mark-returned", json={"rental_id": rental_id}, headers=headers_for(lender_id))

    return _return
