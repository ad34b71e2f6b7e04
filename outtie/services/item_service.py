import math

from flask import current_app
from sqlalchemy.exc import IntegrityError

from outtie.errors import Forbidden, NotFound, ValidationError
from outtie.models.item import CATEGORIES, CONTACT_CHANNELS, PAYMENT_METHODS, Item
from outtie.models.item_photo import ItemPhoto
from outtie.models.saved_item import SavedItem
from outtie.repositories.item_repo import ItemRepo
from outtie.repositories.saved_item_repo import SavedItemRepo
from outtie.services.transaction import transaction
from outtie.utils.validation import as_int, is_blank, reject_unknown

REQUIRED_FIELDS = (
    "title",
    "category",
    "size",
    "rental_price_per_week",
    "pickup_location",
    "payment_method",
    "contact_preferences",
)

# status, lender_id and timestamps are never writable here
MUTABLE_FIELDS = (
    "title",
    "description",
    "category",
    "size",
    "rental_price_per_week",
    "pickup_location",
    "must_return_washed",
    "payment_method",
    "zelle_info",
    "contact_preferences",
)

CREATE_FIELDS = MUTABLE_FIELDS + ("photos",)


def _required_text(value):
    if not isinstance(value, str) or not value.strip():
        raise ValueError
    return value.strip()


def _optional_text(value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError
    return value.strip() or None


def _choice(options):
    def check(value):
        if value not in options:
            raise ValueError
        return value
    return check


def _price(value):
    # JSON numbers only, never numeric strings
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError
    price = float(value)
    if not math.isfinite(price) or price <= 0:
        raise ValueError
    return price


def _flag(value):
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    raise ValueError


def _contacts(value):
    if not isinstance(value, list) or not value:
        raise ValueError
    if any(c not in CONTACT_CHANNELS for c in value) or len(set(value)) != len(value):
        raise ValueError
    return list(value)


def _photos(value):
    if not isinstance(value, list):
        raise ValueError
    return [_required_text(p) for p in value]


_CLEANERS = {
    "title": _required_text,
    "description": _optional_text,
    "category": _choice(CATEGORIES),
    "size": _required_text,
    "rental_price_per_week": _price,
    "pickup_location": _required_text,
    "must_return_washed": _flag,
    "payment_method": _choice(PAYMENT_METHODS),
    "zelle_info": _optional_text,
    "contact_preferences": _contacts,
    "photos": _photos,
}


def clean_item_fields(data: dict, allowed, required=()) -> dict:
    """Validates `data` against the item field rules; raises one ValidationError naming every bad field."""
    reject_unknown(data, allowed)

    errors = [f for f in required if is_blank(data.get(f))]
    cleaned = {}
    for key, value in data.items():
        if key in errors:
            continue
        try:
            cleaned[key] = _CLEANERS[key](value)
        except (TypeError, ValueError, OverflowError):
            errors.append(key)

    if errors:
        raise ValidationError(fields=errors)
    return cleaned


class ItemService:
    def __init__(self, session):
        self.session = session
        self.items = ItemRepo(session)
        self.saved = SavedItemRepo(session)

    def _owned_item(self, item_id: int, user_id: int) -> Item:
        item = self.items.get(item_id)
        if not item:
            raise NotFound("Item not found")
        if item.lender_id != user_id:
            raise Forbidden("Not authorized to modify this item", reason="not_owner")
        return item

    @staticmethod
    def _ensure_not_rented(item: Item):
        if item.status == "rented":
            raise Forbidden("Item is currently rented", reason="item_rented")

    def create_item(self, lender_id: int, data: dict) -> Item:
        fields = clean_item_fields(data, CREATE_FIELDS, REQUIRED_FIELDS)
        photos = fields.pop("photos", [])

        with transaction(self.session, "item"):
            item = Item(lender_id=lender_id, status="available", **fields)
            item.photos = [ItemPhoto(photo_url=url, photo_order=n) for n, url in enumerate(photos)]
            self.items.create(item)

        current_app.logger.info(f"[item] created item={item.id} lender={lender_id}")
        return item

    def update_item(self, item_id: int, user_id: int, data: dict) -> Item:
        if not data:
            raise ValidationError("No fields to update")
        fields = clean_item_fields(data, MUTABLE_FIELDS)

        with transaction(self.session, "item"):
            item = self._owned_item(item_id, user_id)
            self._ensure_not_rented(item)
            for key, value in fields.items():
                setattr(item, key, value)

        return item

    def delete_item(self, item_id: int, user_id: int) -> None:
        with transaction(self.session, "item"):
            item = self.items.get(item_id)
            # missing and foreign items look the same to the caller
            if not item or item.lender_id != user_id:
                raise NotFound("Item not found or not authorized")
            self._ensure_not_rented(item)
            self.items.delete(item)

        current_app.logger.info(f"[item] deleted item={item_id} lender={user_id}")

    def deactivate_item(self, item_id: int, user_id: int) -> Item:
        with transaction(self.session, "item"):
            item = self._owned_item(item_id, user_id)
            self._ensure_not_rented(item)
            if item.status == "available":
                if not self.items.transition_status(item_id, "available", "inactive", lender_id=user_id):
                    # rented between the read and the write
                    raise Forbidden("Item is currently rented", reason="item_rented")
        return item

    def reactivate_item(self, item_id: int, user_id: int) -> Item:
        with transaction(self.session, "item"):
            item = self._owned_item(item_id, user_id)
            self._ensure_not_rented(item)
            if item.status == "inactive":
                self.items.transition_status(item_id, "inactive", "available", lender_id=user_id)
        return item

    def browse_feed(self, user_id: int, limit=None, offset=None):
        errors = []
        limit = as_int(limit, "limit", errors, required=False, from_query=True)
        offset = as_int(offset, "offset", errors, required=False, from_query=True)
        if limit is None:
            limit = current_app.config.get("FEED_DEFAULT_LIMIT", 20)
        if offset is None:
            offset = 0
        if "limit" not in errors and not 1 <= limit <= current_app.config.get("FEED_MAX_LIMIT", 100):
            errors.append("limit")
        if "offset" not in errors and offset < 0:
            errors.append("offset")
        if errors:
            raise ValidationError(fields=errors)

        return self.items.feed(user_id, limit, offset)

    def list_my_items(self, user_id: int):
        return self.items.list_by_lender(user_id)

    def save_item(self, user_id: int, item_id: int) -> None:
        with transaction(self.session, "saved"):
            if not self.items.get(item_id):
                raise NotFound("Item not found")
            if self.saved.get(user_id, item_id):
                return
            try:
                self.saved.create(SavedItem(user_id=user_id, item_id=item_id))
            except IntegrityError:
                # saved concurrently by another request
                self.session.rollback()

    def unsave_item(self, user_id: int, item_id: int) -> None:
        with transaction(self.session, "saved"):
            self.saved.delete(user_id, item_id)

    def list_saved_items(self, user_id: int):
        return self.saved.list_by_user(user_id)
