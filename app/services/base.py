import logging
import re
from typing import Any, Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.core.exceptions import BadRequestError
from app.core.schemas import PaginationMeta, PaginationQuery, SortOrder

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    """createdAt -> created_at; snake_case input passes through."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class BaseService:
    """
    Common plumbing for the service layer: session handling, logging
    and the list-endpoint query builder.
    """

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_warning(self, message: str, **extra: Any):
        self._logger.warning(message, extra=extra or None)

    def commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def paginate(
        self,
        query: Query,
        model: Any,
        params: PaginationQuery,
        search_columns: Iterable[Any] = (),
    ) -> dict:
        """
        Apply search, sort and page window to `query`.

        `search` is a substring match (LIKE) OR-ed across `search_columns`.
        `sort_by` must name a column of `model`, in camelCase or snake_case.
        Returns a dict shaped like PaginatedResponse.
        """
        search_columns = list(search_columns)
        if params.search and search_columns:
            pattern = f"%{params.search}%"
            query = query.filter(or_(*[col.like(pattern) for col in search_columns]))

        sort_column = self._resolve_sort_column(model, params.sort_by)
        if params.sort_order == SortOrder.ASC:
            query = query.order_by(sort_column.asc())
        else:
            query = query.order_by(sort_column.desc())

        total = query.count()
        skip = (params.page - 1) * params.limit
        items = query.offset(skip).limit(params.limit).all()

        return {
            "data": items,
            "meta": PaginationMeta.build(params.page, params.limit, total),
        }

    @staticmethod
    def _resolve_sort_column(model: Any, sort_by: Optional[str]):
        field = to_snake(sort_by or "createdAt")
        if field not in model.__table__.columns:
            raise BadRequestError(
                f"Cannot sort by '{sort_by}'",
                error_code="INVALID_SORT_FIELD",
            )
        return getattr(model, field)
