# techmarket/models/order.py

from sqlalchemy import Column, Integer, String, Text, Float, DateTime
from sqlalchemy.sql import func
from techmarket.utils.database import Base

class Order(Base):
    """
    One completed checkout. Rows are written once and never updated.
    items holds a JSON snapshot of the listings as they were at checkout,
    with no foreign key to products.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    gateway_order_id   = Column(String, nullable=True)
    gateway_payment_id = Column(String, nullable=True)  # not unique
    amount             = Column(Float, nullable=True)
    currency           = Column(String, nullable=True)
    status             = Column(String, nullable=True)
    customer_name      = Column(String, nullable=True)
    customer_email     = Column(String, nullable=True)
    customer_address   = Column(Text, nullable=True)
    gps_coordinates    = Column(Text, nullable=True)    # JSON {"latitude", "longitude"}
    items              = Column(Text, nullable=True)    # JSON list
    created_at         = Column(DateTime(timezone=True), server_default=func.now())
