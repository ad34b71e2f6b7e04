from datetime import datetime

from sqlalchemy.orm import joinedload, selectinload

from outtie.models.item import Item
from outtie.models.saved_item import SavedItem


class ItemRepo:
    def __init__(self, session):
        self.session = session

    def get(self, item_id: int):
        return self.session.get(Item, item_id)

    def create(self, item: Item):
        self.session.add(item)
        self.session.flush()
        return item

    def delete(self, item: Item):
        self.session.delete(item)
        self.session.flush()

    def list_by_lender(self, lender_id: int):
        return (
            self.session.query(Item)
            .options(selectinload(Item.photos))
            .filter(Item.lender_id == lender_id)
            .order_by(Item.created_at.desc(), Item.id.desc())
            .all()
        )

    def feed(self, user_id: int, limit: int, offset: int):
        saved_ids = self.session.query(SavedItem.item_id).filter(SavedItem.user_id == user_id)
        return (
            self.session.query(Item)
            .options(joinedload(Item.lender), selectinload(Item.photos))
            .filter(
                Item.status == "available",
                Item.lender_id != user_id,
                Item.id.notin_(saved_ids.scalar_subquery()),
            )
            .order_by(Item.created_at.desc(), Item.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def transition_status(self, item_id: int, from_status: str, to_status: str, lender_id: int | None = None) -> int:
        """
        Conditional status write. Returns the number of rows changed (0 or 1);
        0 means the item is missing, owned by someone else or not in `from_status`.
        """
        q = self.session.query(Item).filter(Item.id == item_id, Item.status == from_status)
        if lender_id is not None:
            q = q.filter(Item.lender_id == lender_id)
        return q.update({"status": to_status, "updated_at": datetime.utcnow()}, synchronize_session=False)

    def set_status(self, item_id: int, status: str) -> int:
        return (
            self.session.query(Item)
            .filter(Item.id == item_id)
            .update({"status": status, "updated_at": datetime.utcnow()}, synchronize_session=False)
        )
