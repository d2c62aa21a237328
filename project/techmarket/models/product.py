# techmarket/models/product.py

from sqlalchemy import Column, Integer, String, Text, Float, DateTime
from sqlalchemy.sql import func
from techmarket.utils.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title       = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price       = Column(Float, nullable=False)     # major currency unit (rupees)
    category    = Column(String, nullable=True)     # free text
    image       = Column(Text, nullable=True)       # URL or data URI
    seller_name = Column(String, nullable=True)
    created_at  = Column(DateTime(timezone=True), server_default=func.now())
