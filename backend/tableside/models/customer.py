"""Customer-facing records - feedback and loyalty balances."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import validates

from tableside.core.clock import utcnow
from tableside.db.base import Base
from tableside.models.validators import in_range, non_negative


class Feedback(Base):
    """Rating left from a table after a meal."""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    order_id = Column(Integer, nullable=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @validates('rating')
    def _validate_rating(self, key, value):
        return in_range(key, value, 1, 5)


class LoyaltyAccount(Base):
    """Loyalty balance keyed by phone number or e-mail."""
    __tablename__ = "loyalty_points"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(String(255), nullable=False, unique=True, index=True)
    points = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @validates('points')
    def _validate_points(self, key, value):
        return non_negative(key, value)
