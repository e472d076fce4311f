# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, position, employee_profile, contract, assignment,
    evaluation_template, evaluation_cycle, performance_evaluation, performance_goal,
)

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .position import Position
from .employee_profile import EmployeeProfile
from .contract import Contract, ContractStatus, ContractType
from .assignment import Assignment
from .evaluation_template import EvaluationTemplate
from .evaluation_cycle import EvaluationCycle, CycleStatus
from .performance_evaluation import PerformanceEvaluation, EvaluationType, EvaluationStatus
from .performance_goal import PerformanceGoal, GoalCategory, GoalStatus, GoalPriority

__all__ = [
    "User",
    "UserRole",
    "Position",
    "EmployeeProfile",
    "Contract",
    "ContractStatus",
    "ContractType",
    "Assignment",
    "EvaluationTemplate",
    "EvaluationCycle",
    "CycleStatus",
    "PerformanceEvaluation",
    "EvaluationType",
    "EvaluationStatus",
    "PerformanceGoal",
    "GoalCategory",
    "GoalStatus",
    "GoalPriority",
]
