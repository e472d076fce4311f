from enum import Enum
from math import ceil
from typing import ClassVar, Generic, List, Optional, Tuple, TypeVar
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for HR/performance payloads. Fields are snake_case in Python and
    camelCase on the wire; either spelling is accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """
    Base for update payloads. Omitted fields are left untouched, but the
    columns listed in `required_fields` cannot be cleared with an explicit null.
    """
    required_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        cleared = [
            to_camel(name)
            for name in self.required_fields
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class PaginationQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    search: Optional[str] = None
    sort_by: str = "createdAt"
    sort_order: SortOrder = SortOrder.DESC


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PaginatedResponse(CamelModel, Generic[T]):
    data: List[T]
    meta: PaginationMeta


class MessageResponse(BaseModel):
    message: str
