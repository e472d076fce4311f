"""
Organization hierarchy lookups over the employee directory.

The manager link (`User.manager_id`) is a weak reference: nothing prevents a
loop at write time, so every traversal here keeps a visited set. Lookups on an
unknown employee return an empty list instead of raising.
"""
from collections import deque
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.services.base import BaseService


class OrganizationGraph(BaseService):
    """Read-only relationship queries: never mutates the directory."""

    def __init__(self, db: Session):
        super().__init__(db)

    def _get(self, employee_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == employee_id).first()

    def subordinates_of(self, employee_id: str) -> List[User]:
        """Direct reports of `employee_id` (active or not)."""
        if self._get(employee_id) is None:
            return []
        return (
            self.db.query(User)
            .filter(User.manager_id == employee_id)
            .order_by(User.created_at.asc(), User.id.asc())
            .all()
        )

    def all_subordinates_recursive(self, employee_id: str) -> List[User]:
        """
        Transitive closure of `subordinates_of`, breadth first.

        The starting employee is marked visited before the walk, so it never
        shows up in its own result even when the manager links loop back.
        """
        collected: List[User] = []
        visited = {employee_id}
        pending = deque([employee_id])

        while pending:
            current_id = pending.popleft()
            for subordinate in self.subordinates_of(current_id):
                if subordinate.id in visited:
                    continue
                visited.add(subordinate.id)
                collected.append(subordinate)
                pending.append(subordinate.id)

        return collected

    def peers_of(self, employee_id: str) -> List[User]:
        """Active employees sharing the same manager, excluding the employee."""
        employee = self._get(employee_id)
        if employee is None or not employee.manager_id:
            return []

        return (
            self.db.query(User)
            .filter(
                User.manager_id == employee.manager_id,
                User.is_active.is_(True),
                User.id != employee_id,
            )
            .order_by(User.created_at.asc(), User.id.asc())
            .all()
        )

    def employees_under_hierarchy(self, root_employee_id: Optional[str] = None) -> List[User]:
        """
        With a root: the (active) root followed by all of its subordinates.
        Without one: every active employee, oldest first.
        """
        if root_employee_id:
            root = (
                self.db.query(User)
                .filter(User.id == root_employee_id, User.is_active.is_(True))
                .first()
            )
            if root is None:
                return []
            return [root] + self.all_subordinates_recursive(root_employee_id)

        return (
            self.db.query(User)
            .filter(User.is_active.is_(True))
            .order_by(User.created_at.asc(), User.id.asc())
            .all()
        )

    def find_manager_cycles(self) -> List[List[str]]:
        """
        Data-quality pass: report every loop in the manager links as the list of
        employee ids forming it. Traversals stay finite regardless; this only
        surfaces the bad data.
        """
        manager_of: Dict[str, Optional[str]] = dict(
            self.db.query(User.id, User.manager_id).all()
        )

        cycles: List[List[str]] = []
        settled: set = set()

        for start in manager_of:
            if start in settled:
                continue
            path: List[str] = []
            position: Dict[str, int] = {}
            current: Optional[str] = start
            while current is not None and current not in settled and current not in position:
                position[current] = len(path)
                path.append(current)
                current = manager_of.get(current)
            if current is not None and current in position:
                cycles.append(path[position[current]:])
            settled.update(path)

        if cycles:
            self.log_warning(f"Detected {len(cycles)} manager cycle(s) in the directory")
        return cycles
