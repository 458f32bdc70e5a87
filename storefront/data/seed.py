# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db, unit_of_work
from storefront.data.models import AddressModel, ProductModel, UserModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "discount": Decimal("0"), "stock_quantity": 25},
    {"name": "Mouse", "price": Decimal("49.50"), "discount": Decimal("0.10"), "stock_quantity": 40},
    {"name": "Monitor", "price": Decimal("899.00"), "discount": Decimal("0.05"), "stock_quantity": 5},
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            return
        with unit_of_work(db):
            db.add(UserModel(id=1, name="Demo"))
            db.add(AddressModel(
                user_id=1,
                street="1 Market St",
                city="Springfield",
                state="IL",
                postal_code="62701",
                country="US",
            ))
            db.add_all(ProductModel(**p) for p in PRODUCTS)
        logger.info(f"Seeded demo user, address and {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
