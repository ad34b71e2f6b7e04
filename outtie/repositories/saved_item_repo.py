from sqlalchemy.orm import joinedload, selectinload

from outtie.models.item import Item
from outtie.models.saved_item import SavedItem


class SavedItemRepo:
    def __init__(self, session):
        self.session = session

    def get(self, user_id: int, item_id: int):
        return self.session.query(SavedItem).filter_by(user_id=user_id, item_id=item_id).first()

    def create(self, saved: SavedItem):
        self.session.add(saved)
        self.session.flush()
        return saved

    def delete(self, user_id: int, item_id: int) -> int:
        return (
            self.session.query(SavedItem)
            .filter_by(user_id=user_id, item_id=item_id)
            .delete(synchronize_session=False)
        )

    def list_by_user(self, user_id: int):
        return (
            self.session.query(SavedItem)
            .options(joinedload(SavedItem.item).joinedload(Item.lender), joinedload(SavedItem.item).selectinload(Item.photos))
            .filter(SavedItem.user_id == user_id)
            .order_by(SavedItem.created_at.desc(), SavedItem.id.desc())
            .all()
        )
