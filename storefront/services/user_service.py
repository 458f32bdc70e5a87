from sqlalchemy.orm import Session

from storefront.data.database import unit_of_work
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFound
from storefront.repos.user_repo import UserRepo
from storefront.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead(id=existing.id, name=existing.name)

        with unit_of_work(self.db):
            created = self.repo.create_user(UserModel(id=payload.id, name=payload.name))
        return UserRead(id=created.id, name=created.name)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("user", user_id)
        return UserRead(id=user.id, name=user.name)
