"""Restaurant floor models - menu items, tables, orders."""

from decimal import Decimal
from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, ForeignKey, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates

from tableside.db.base import Base, TimestampMixin, VersionMixin
from tableside.models.validators import in_range, non_negative, positive, required_text


def _enum_column(enum_cls, **kwargs):
    """Store enum values (not names) in a portable VARCHAR column."""
    return Column(
        SQLEnum(enum_cls, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        **kwargs,
    )


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    PAID = "paid"


class OrderType(str, Enum):
    DINE_IN = "dine-in"
    TAKEOUT = "takeout"
    ORDER_AHEAD = "order-ahead"


class PaymentMode(str, Enum):
    CASH = "cash"
    UPI = "upi"


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class MenuItem(TimestampMixin, Base):
    """Dish or drink on the customer menu."""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    image = Column(Text, nullable=True)  # URL or inline data URI
    is_vegetarian = Column(Boolean, default=False, nullable=False)
    is_spicy = Column(Boolean, default=False, nullable=False)
    preparation_time = Column(Integer, default=15, nullable=False)  # minutes
    in_stock = Column(Boolean, default=True, nullable=False)
    inventory = Column(Integer, default=100, nullable=False)

    @validates('name', 'category')
    def _validate_text(self, key, value):
        return required_text(key, value)

    @validates('price')
    def _validate_price(self, key, value):
        return positive(key, value)

    @validates('preparation_time')
    def _validate_preparation_time(self, key, value):
        return positive(key, value)

    @validates('inventory')
    def _validate_inventory(self, key, value):
        return non_negative(key, value)


class Table(TimestampMixin, VersionMixin, Base):
    """Restaurant table, addressed by its printed number on the QR code."""
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False, unique=True, index=True)
    seats = Column(Integer, nullable=False, default=4)
    status = _enum_column(TableStatus, nullable=False, default=TableStatus.AVAILABLE)
    current_order_id = Column(Integer, nullable=True)
    reserved_by = Column(String(200), nullable=True)
    reserved_until = Column(String(20), nullable=True)  # HH:MM

    @validates('number')
    def _validate_number(self, key, value):
        return positive(key, value)

    @validates('seats')
    def _validate_seats(self, key, value):
        return in_range(key, value, 1, 20)


class Order(TimestampMixin, VersionMixin, Base):
    """Customer order placed from a table."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    customer_name = Column(String(200), nullable=True)
    customer_id = Column(String(255), nullable=True, index=True)  # loyalty key: phone or e-mail

    status = _enum_column(OrderStatus, nullable=False, default=OrderStatus.PENDING, index=True)
    order_type = _enum_column(OrderType, nullable=False, default=OrderType.DINE_IN)
    payment_mode = _enum_column(PaymentMode, nullable=False, default=PaymentMode.CASH)

    total_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    loyalty_points_earned = Column(Integer, nullable=False, default=0)
    loyalty_points_awarded = Column(Boolean, nullable=False, default=False)

    scheduled_time = Column(DateTime(timezone=True), nullable=True)  # order-ahead pickup
    paid_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
    )

    @validates('total_amount')
    def _validate_total(self, key, value):
        return non_negative(key, value)

    @validates('loyalty_points_earned')
    def _validate_points(self, key, value):
        return non_negative(key, value)


class OrderLine(Base):
    """One menu item within an order, priced when the order was placed."""
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    menu_item_id = Column(Integer, nullable=False)

    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    pack = Column(Boolean, nullable=False, default=False)  # takeaway packaging

    # Relationships
    order = relationship("Order", back_populates="lines")

    @validates('quantity')
    def _validate_quantity(self, key, value):
        return positive(key, value)

    @validates('unit_price')
    def _validate_unit_price(self, key, value):
        return non_negative(key, value)

    @property
    def line_total(self) -> Decimal:
        return Decimal(str(self.unit_price)) * self.quantity
