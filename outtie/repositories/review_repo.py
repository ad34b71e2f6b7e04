from outtie.models.review import Review


class ReviewRepo:
    def __init__(self, session):
        self.session = session

    def exists(self, rental_id: int, reviewer_id: int) -> bool:
        return self.session.query(Review).filter_by(rental_id=rental_id, reviewer_id=reviewer_id).first() is not None

    def create(self, review: Review):
        self.session.add(review)
        self.session.flush()
        return review
