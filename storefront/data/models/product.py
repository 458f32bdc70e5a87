from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)

    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    # ulamek z przedzialu [0, 1)
    discount = Column(Numeric(5, 4), nullable=False, default=0)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=lambda: datetime.now(timezone.utc))
