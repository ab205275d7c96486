from sqlalchemy import Column, String, Float, Integer, DateTime
from datetime import datetime
from catalog_admin.database.connection import Base


class Product(Base):
    __tablename__ = "products"

    # assigned by the store as max(id) + 1, never autoincremented by sqlite
    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    image = Column(String, default="")

    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="active")
    sales = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
