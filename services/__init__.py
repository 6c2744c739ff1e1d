"""
목표 도메인 서비스 패키지

- progress: 진행률/진행 기록/달성 여부 계산 (순수 함수)
- milestones: LLM 마일스톤 생성 + 기본 마일스톤 대체
- goal_service: 목표 생성/조회/갱신 오케스트레이션
"""

from services.exceptions import (
    GoalError,
    InvalidGoalInputError,
    GoalNotFoundError,
    GoalPersistenceError,
    CorruptGoalDataError,
    MilestoneGenerationError,
)
from services.goal_service import GoalService
from services.schemas import GoalRecord, GoalSummary, Milestone, ProgressEntry

__all__ = [
    "GoalError",
    "InvalidGoalInputError",
    "GoalNotFoundError",
    "GoalPersistenceError",
    "CorruptGoalDataError",
    "MilestoneGenerationError",
    "GoalService",
    "GoalRecord",
    "GoalSummary",
    "Milestone",
    "ProgressEntry",
]
