import os
import tempfile

# ustawienia musza byc w env zanim zaimportujemy storefront.*
_TMP = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'app.db')}")
os.environ.setdefault("CHECKOUT_LOCK_ENABLED", "false")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CONFLICT_RETRY_ATTEMPTS", "5")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from storefront.data.database import init_db, make_engine  # noqa: E402
from storefront.data.models import AddressModel, ProductModel, UserModel  # noqa: E402
from storefront.services.cart_service import CartService  # noqa: E402
from storefront.services.order_service import OrderService  # noqa: E402


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))


class Store:
    """Zapis danych testowych w osobnej sesji, kazda operacja z commitem."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _save(self, obj):
        with self.session_factory() as s:
            s.add(obj)
            s.commit()
            s.refresh(obj)
            return obj.id

    def user(self, user_id: int = 1, name: str = "Alice") -> int:
        return self._save(UserModel(id=user_id, name=name))

    def address(self, user_id: int | None = None) -> int:
        return self._save(
            AddressModel(
                user_id=user_id,
                street="1 Main St",
                city="Springfield",
                state="IL",
                postal_code="62701",
                country="US",
            )
        )

    def product(self, price="10.00", discount="0", stock: int = 10, name: str = "Widget") -> int:
        return self._save(
            ProductModel(
                name=name,
                price=Decimal(price),
                discount=Decimal(discount),
                stock_quantity=stock,
            )
        )

    def stock(self, product_id: int) -> int:
        with self.session_factory() as s:
            return s.get(ProductModel, product_id).stock_quantity

    def update_product(self, product_id: int, **values) -> None:
        with self.session_factory() as s:
            product = s.get(ProductModel, product_id)
            for key, value in values.items():
                setattr(product, key, value)
            s.commit()


@pytest.fixture()
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def store(session_factory):
    return Store(session_factory)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def cart_service(db):
    return CartService(db)


@pytest.fixture()
def order_service(db, notifier):
    return OrderService(db, notification_service=notifier)


@pytest.fixture()
def user_id(store):
    return store.user(1)


@pytest.fixture()
def address_id(store, user_id):
    return store.address(user_id)
