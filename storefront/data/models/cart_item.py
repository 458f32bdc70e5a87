from sqlalchemy import Column, Integer, ForeignKey, Numeric, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    # snapshot ceny i rabatu z chwili dodania / ostatniej zmiany pozycji
    price_at_addition = Column(Numeric(10, 2), nullable=False)
    discount_at_addition = Column(Numeric(5, 4), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_cart_product"),)
