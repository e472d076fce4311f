from sqlalchemy import String, cast
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFoundError
from app.core.schemas import PaginationQuery
from app.models.contract import Contract, ContractStatus
from app.models.user import User
from app.schemas.hr import ContractCreate, ContractUpdate
from app.services.base import BaseService


class ContractService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def create(self, data: ContractCreate) -> Contract:
        if not self.db.query(User).filter(User.id == data.user_id).first():
            raise NotFoundError("User not found")

        # New contracts always start as drafts
        contract = Contract(**data.model_dump(), status=ContractStatus.DRAFT)
        self.db.add(contract)
        self.commit()
        self._logger.info(f"Contract created: {contract.id}")
        return self.find_one(contract.id)

    def find_all(self, params: PaginationQuery) -> dict:
        query = (
            self.db.query(Contract)
            .join(User, Contract.user_id == User.id)
            .options(joinedload(Contract.user), joinedload(Contract.assignments))
        )
        return self.paginate(
            query,
            Contract,
            params,
            search_columns=[
                User.first_name,
                User.last_name,
                User.employee_code,
                User.email,
                cast(Contract.contract_type, String),
                cast(Contract.status, String),
            ],
        )

    def find_one(self, contract_id: str) -> Contract:
        contract = (
            self.db.query(Contract)
            .options(joinedload(Contract.user), joinedload(Contract.assignments))
            .filter(Contract.id == contract_id)
            .first()
        )
        if not contract:
            raise NotFoundError(f"Contract with ID {contract_id} not found")
        return contract

    def update_status(self, contract_id: str, status: ContractStatus) -> Contract:
        contract = self.find_one(contract_id)
        previous = contract.status
        contract.status = status
        self.commit()
        self._logger.info(f"Contract {contract_id} status {previous} -> {status}")
        return self.find_one(contract_id)

    def update(self, contract_id: str, data: ContractUpdate) -> Contract:
        contract = self.find_one(contract_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(contract, field, value)
        self.commit()
        return self.find_one(contract_id)

    def remove(self, contract_id: str) -> None:
        contract = self.find_one(contract_id)
        self.db.delete(contract)
        self.commit()
        self._logger.info(f"Contract {contract_id} deleted")
