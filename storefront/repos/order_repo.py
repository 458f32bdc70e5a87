# storefront/repos/order_repo.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.flush()
        return order

    def _page(self, where, page: int, size: int) -> Tuple[List[OrderModel], int]:
        count_stmt = select(func.count(OrderModel.id))
        stmt = select(OrderModel).options(selectinload(OrderModel.items))
        for clause in where:
            count_stmt = count_stmt.where(clause)
            stmt = stmt.where(clause)

        total = self.db.execute(count_stmt).scalar_one()
        items = self.db.execute(
            stmt.order_by(OrderModel.order_date.desc(), OrderModel.id.desc())
            .offset(page * size)
            .limit(size)
        ).scalars().all()
        return list(items), total

    def list_all(self, page: int, size: int):
        return self._page([], page, size)

    def list_by_user(self, user_id: int, page: int, size: int):
        return self._page([OrderModel.user_id == user_id], page, size)

    def list_by_status(self, status: str, page: int, size: int):
        return self._page([OrderModel.status == status], page, size)

    def list_between(self, start: datetime, end: datetime, page: int, size: int):
        return self._page(
            [OrderModel.order_date >= start, OrderModel.order_date <= end], page, size
        )

    def totals(self) -> Tuple[int, Decimal]:
        count, sales = self.db.execute(
            select(func.count(OrderModel.id), func.coalesce(func.sum(OrderModel.total_amount), 0))
        ).one()
        return count, Decimal(str(sales))

    def counts_by_status(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
        ).all()
        return {status: count for status, count in rows}
