"""
Organization chart positions.

Positions form a tree through `parent_id`. Re-parenting is checked so the
chart never loops; deleting a node hands its children to its own parent.
"""
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.core.schemas import PaginationQuery
from app.models.assignment import Assignment
from app.models.position import Position
from app.schemas.hr import PositionCreate, PositionUpdate
from app.services.base import BaseService


class PositionService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def create(self, data: PositionCreate) -> Position:
        if data.parent_id:
            self.find_one(data.parent_id)
        position = Position(**data.model_dump())
        self.db.add(position)
        self.commit()
        self._logger.info(f"Position created: {position.title}", extra={"position_id": position.id})
        return position

    def find_all(self, params: PaginationQuery) -> dict:
        return self.paginate(
            self.db.query(Position),
            Position,
            params,
            search_columns=[Position.title, Position.description, Position.department],
        )

    def find_flat(self) -> List[Position]:
        return (
            self.db.query(Position)
            .order_by(Position.level.asc(), Position.order.asc(), Position.title.asc())
            .all()
        )

    def find_tree(self) -> List[dict]:
        """Nested chart: each node is a dict with a `children` list, roots first."""
        positions = self.find_flat()
        nodes: Dict[str, dict] = {}
        for position in positions:
            node = {c.name: getattr(position, c.name) for c in Position.__table__.columns}
            node["children"] = []
            nodes[position.id] = node

        roots: List[dict] = []
        for position in positions:
            node = nodes[position.id]
            parent = nodes.get(position.parent_id) if position.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent["children"].append(node)
        return roots

    def find_one(self, position_id: str) -> Position:
        position = self.db.query(Position).filter(Position.id == position_id).first()
        if not position:
            raise NotFoundError(f"Position with ID {position_id} not found")
        return position

    def update(self, position_id: str, data: PositionUpdate) -> Position:
        position = self.find_one(position_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(position, field, value)
        self.commit()
        return position

    def update_parent(self, position_id: str, parent_id: Optional[str]) -> Position:
        position = self.find_one(position_id)
        if parent_id:
            if parent_id == position_id:
                raise BadRequestError("A position cannot be its own parent", error_code="INVALID_PARENT")
            self.find_one(parent_id)
            if parent_id in self._descendant_ids(position_id):
                raise BadRequestError(
                    "Cannot move a position under one of its descendants",
                    error_code="INVALID_PARENT",
                )
        position.parent_id = parent_id
        self.commit()
        self._logger.info(f"Position {position_id} moved under {parent_id or 'root'}")
        return position

    def update_coordinates(self, position_id: str, x: float, y: float) -> Position:
        position = self.find_one(position_id)
        position.x = x
        position.y = y
        self.commit()
        return position

    def reset_layout(self) -> int:
        count = self.db.query(Position).update({Position.x: None, Position.y: None}, synchronize_session=False)
        self.commit()
        self._logger.info(f"Layout reset for {count} positions")
        return count

    def remove(self, position_id: str) -> None:
        position = self.find_one(position_id)
        if self.db.query(Assignment).filter(Assignment.position_id == position_id).first():
            raise ConflictError("Position has assignments and cannot be deleted")
        self.db.query(Position).filter(Position.parent_id == position_id).update(
            {Position.parent_id: position.parent_id}, synchronize_session="fetch"
        )
        self.db.delete(position)
        self.commit()
        self._logger.info(f"Position {position_id} deleted")

    def _descendant_ids(self, position_id: str) -> set:
        found: set = set()
        frontier = [position_id]
        while frontier:
            rows = self.db.query(Position.id).filter(Position.parent_id.in_(frontier)).all()
            frontier = [row[0] for row in rows if row[0] not in found]
            found.update(frontier)
        return found
