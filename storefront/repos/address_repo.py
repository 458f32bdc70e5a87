from sqlalchemy.orm import Session
from storefront.data.models.address import AddressModel

class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def exists(self, address_id: int) -> bool:
        return self.get_address(address_id) is not None
