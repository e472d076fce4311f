"""
Demo data seeder.

Builds a small organization chart, users wired to managers through position
parentage, one active contract and primary assignment per user, a few goals
and an evaluation template. Each record is committed on its own; a failure
is rolled back, recorded in `errors` and the run continues.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.assignment import Assignment
from app.models.contract import Contract, ContractStatus, ContractType
from app.models.employee_profile import EmployeeProfile
from app.models.evaluation_cycle import EvaluationCycle
from app.models.evaluation_template import EvaluationTemplate
from app.models.performance_evaluation import PerformanceEvaluation
from app.models.performance_goal import GoalPriority, PerformanceGoal
from app.models.position import Position
from app.models.user import User, UserRole
from app.services import auth as auth_service
from app.services.base import BaseService

SEED_CODE_PREFIX = "SEED-"
SEED_EMAIL_DOMAIN = "seed.example.com"
SEED_TEMPLATE_TITLE = "Annual Review (seed)"
DEFAULT_PASSWORD = "password123"

# (title, level, department, parent title)
POSITIONS = [
    ("Chief Executive Officer", 1, "Executive", None),
    ("Chief Operating Officer", 2, "Executive", "Chief Executive Officer"),
    ("Chief Financial Officer", 2, "Executive", "Chief Executive Officer"),
    ("HR Manager", 3, "Human Resources", "Chief Operating Officer"),
    ("Sales Manager", 3, "Sales", "Chief Operating Officer"),
    ("IT Manager", 3, "Engineering", "Chief Operating Officer"),
    ("Finance Manager", 3, "Finance", "Chief Financial Officer"),
    ("HR Specialist", 4, "Human Resources", "HR Manager"),
    ("Recruiter", 4, "Human Resources", "HR Manager"),
    ("Account Executive", 4, "Sales", "Sales Manager"),
    ("Sales Support", 4, "Sales", "Sales Manager"),
    ("Senior Developer", 4, "Engineering", "IT Manager"),
    ("Project Manager", 4, "Engineering", "IT Manager"),
    ("Accountant", 4, "Finance", "Finance Manager"),
    ("Developer", 5, "Engineering", "Senior Developer"),
]

FIRST_NAMES = ["Alice", "Bob", "Carol", "David", "Erin", "Frank", "Grace", "Heidi", "Ivan", "Judy", "Mallory", "Niaj"]
LAST_NAMES = ["Smith", "Johnson", "Brown", "Taylor", "Lee", "Walker", "Young", "King", "Wright", "Green"]

TEMPLATE_CATEGORIES = [
    {
        "name": "Job Knowledge",
        "description": "Command of the skills the role requires",
        "weight": 40,
        "criteria": [
            {"title": "Technical skills", "description": "Depth of role-specific skills"},
            {"title": "Quality of work", "description": "Accuracy and thoroughness"},
        ],
    },
    {
        "name": "Collaboration",
        "description": "Working with others",
        "weight": 30,
        "criteria": [{"title": "Communication", "description": "Clarity of written and verbal communication"}],
    },
    {
        "name": "Delivery",
        "description": "Meeting commitments",
        "weight": 30,
        "criteria": [{"title": "Timeliness", "description": "Work is delivered on schedule"}],
    },
]


def _empty_result() -> dict:
    return {
        "positions": 0,
        "users": 0,
        "contracts": 0,
        "assignments": 0,
        "goals": 0,
        "templates": 0,
        "errors": [],
    }


class SeederService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def seed(self, user_count: int = 20, position_count: Optional[int] = None, goal_count: int = 10) -> dict:
        result = _empty_result()
        self._logger.info(f"Seeding demo data: {user_count} users")

        positions = self._seed_positions(POSITIONS[: position_count or len(POSITIONS)], result)
        if not positions:
            result["errors"].append("No positions available; users were not created")
            return result

        users = self._seed_users(user_count, positions, result)
        self._seed_goals(users[:goal_count], result)
        self._seed_template(result)

        self._logger.info(f"Seeding finished with {len(result['errors'])} error(s)", extra={"counts": {k: v for k, v in result.items() if k != "errors"}})
        return result

    def _attempt(self, label: str, result: dict, record) -> bool:
        self.db.add(record)
        try:
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            self.log_warning(f"Seed record failed: {label}: {e}")
            result["errors"].append(f"{label}: {e}")
            return False

    def _seed_positions(self, rows, result: dict) -> List[Position]:
        by_title: Dict[str, Position] = {}
        for order, (title, level, department, parent_title) in enumerate(rows, start=1):
            parent = by_title.get(parent_title) if parent_title else None
            position = Position(
                title=title,
                level=level,
                department=department,
                parent_id=parent.id if parent else None,
                order=order,
                is_active=True,
            )
            if self._attempt(f"Position {title}", result, position):
                by_title[title] = position
                result["positions"] += 1
        return list(by_title.values())

    def _seed_users(self, user_count: int, positions: List[Position], result: dict) -> List[User]:
        hashed = auth_service.get_password_hash(DEFAULT_PASSWORD)
        holder_of: Dict[str, User] = {}
        users: List[User] = []

        for index in range(1, user_count + 1):
            position = positions[(index - 1) % len(positions)]
            manager = holder_of.get(position.parent_id) if position.parent_id else None
            first = FIRST_NAMES[(index - 1) % len(FIRST_NAMES)]
            last = LAST_NAMES[(index - 1) % len(LAST_NAMES)]
            code = f"{SEED_CODE_PREFIX}{index:04d}"

            user = User(
                email=f"user{index:03d}@{SEED_EMAIL_DOMAIN}",
                hashed_password=hashed,
                first_name=first,
                last_name=last,
                employee_code=code,
                role=UserRole.MANAGER if position.level <= 3 else UserRole.EMPLOYEE,
                manager_id=manager.id if manager else None,
                position_id=position.id,
                is_active=True,
            )
            if not self._attempt(f"User {code}", result, user):
                continue
            result["users"] += 1
            users.append(user)
            holder_of.setdefault(position.id, user)

            hire_date = date(2018 + index % 6, (index % 12) + 1, (index % 28) + 1)
            self._attempt(
                f"Profile for {code}",
                result,
                EmployeeProfile(
                    user_id=user.id,
                    national_id=f"SEED{index:08d}",
                    birth_date=date(1975 + index % 25, (index % 12) + 1, (index % 28) + 1),
                    hire_date=hire_date,
                    department=position.department,
                    job_title=position.title,
                ),
            )

            part_time = index % 5 == 0
            contract = Contract(
                user_id=user.id,
                contract_type=ContractType.PART_TIME if part_time else ContractType.FULL_TIME,
                start_date=hire_date,
                status=ContractStatus.ACTIVE,
            )
            if not self._attempt(f"Contract for {code}", result, contract):
                continue
            result["contracts"] += 1

            assignment = Assignment(
                contract_id=contract.id,
                position_id=position.id,
                workload_percentage=50.0 if part_time else 100.0,
                start_date=hire_date,
                is_primary=True,
            )
            if self._attempt(f"Assignment for {code}", result, assignment):
                result["assignments"] += 1

        return users

    def _seed_goals(self, users: List[User], result: dict) -> None:
        deadline = datetime.now(timezone.utc) + timedelta(days=90)
        for user in users:
            goal = PerformanceGoal(
                employee_id=user.id,
                setter_id=user.manager_id,
                title="Complete quarterly objectives",
                description="Deliver the objectives agreed for this quarter",
                priority=GoalPriority.MEDIUM,
                deadline=deadline,
                progress=0,
            )
            if self._attempt(f"Goal for {user.employee_code}", result, goal):
                result["goals"] += 1

    def _seed_template(self, result: dict) -> None:
        template = EvaluationTemplate(
            title=SEED_TEMPLATE_TITLE,
            description="Default template created by the demo seeder",
            categories=TEMPLATE_CATEGORIES,
            is_active=True,
        )
        if self._attempt("Template", result, template):
            result["templates"] += 1

    def clear(self) -> dict:
        """Remove every record created by `seed`. Users created by hand are kept."""
        result = _empty_result()
        seeded_ids = [
            row[0]
            for row in self.db.query(User.id).filter(User.employee_code.like(f"{SEED_CODE_PREFIX}%")).all()
        ]

        try:
            if seeded_ids:
                self.db.query(PerformanceEvaluation).filter(
                    PerformanceEvaluation.employee_id.in_(seeded_ids)
                    | PerformanceEvaluation.evaluator_id.in_(seeded_ids)
                ).delete(synchronize_session=False)
                result["goals"] = self.db.query(PerformanceGoal).filter(
                    PerformanceGoal.employee_id.in_(seeded_ids)
                ).delete(synchronize_session=False)

                contract_ids = [
                    row[0] for row in self.db.query(Contract.id).filter(Contract.user_id.in_(seeded_ids)).all()
                ]
                if contract_ids:
                    result["assignments"] = self.db.query(Assignment).filter(
                        Assignment.contract_id.in_(contract_ids)
                    ).delete(synchronize_session=False)
                    result["contracts"] = self.db.query(Contract).filter(
                        Contract.id.in_(contract_ids)
                    ).delete(synchronize_session=False)

                self.db.query(EmployeeProfile).filter(
                    EmployeeProfile.user_id.in_(seeded_ids)
                ).delete(synchronize_session=False)
                self.db.query(User).filter(User.id.in_(seeded_ids)).update(
                    {User.manager_id: None}, synchronize_session=False
                )
                result["users"] = self.db.query(User).filter(User.id.in_(seeded_ids)).delete(
                    synchronize_session=False
                )

            template_ids = [
                row[0]
                for row in self.db.query(EvaluationTemplate.id)
                .filter(EvaluationTemplate.title == SEED_TEMPLATE_TITLE)
                .all()
            ]
            in_use = {
                row[0]
                for row in self.db.query(EvaluationCycle.template_id)
                .filter(EvaluationCycle.template_id.in_(template_ids))
                .all()
            } if template_ids else set()
            removable = [t for t in template_ids if t not in in_use]
            if removable:
                result["templates"] = self.db.query(EvaluationTemplate).filter(
                    EvaluationTemplate.id.in_(removable)
                ).delete(synchronize_session=False)

            result["positions"] = self._clear_positions()
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            self._logger.error(f"Clearing seed data failed: {e}", exc_info=True)
            result["errors"].append(f"General error: {e}")
            return result

        self._logger.info("Seed data cleared", extra={k: v for k, v in result.items() if k != "errors"})
        return result

    def _clear_positions(self) -> int:
        """Seeded positions nobody holds or is assigned to, leaves first."""
        titles = [row[0] for row in POSITIONS]
        removed = 0
        while True:
            candidates = (
                self.db.query(Position)
                .filter(
                    Position.title.in_(titles),
                    ~Position.holders.any(),
                    ~Position.assignments.any(),
                    ~Position.children.any(),
                )
                .all()
            )
            if not candidates:
                return removed
            for position in candidates:
                self.db.delete(position)
            self.db.flush()
            removed += len(candidates)

    def stats(self) -> dict:
        counts = {
            "positions": self.db.query(Position).count(),
            "users": self.db.query(User).count(),
            "profiles": self.db.query(EmployeeProfile).count(),
            "contracts": self.db.query(Contract).count(),
            "assignments": self.db.query(Assignment).count(),
            "goals": self.db.query(PerformanceGoal).count(),
            "evaluations": self.db.query(PerformanceEvaluation).count(),
            "templates": self.db.query(EvaluationTemplate).count(),
        }
        counts["total"] = sum(counts.values())
        return counts
