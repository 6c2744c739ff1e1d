"""
목표 서비스 예외 정의

API 계층에서 HTTP 상태 코드로 변환됩니다:
- InvalidGoalInputError -> 400
- GoalNotFoundError -> 404 (다른 사용자의 목표도 동일하게 404)
- GoalPersistenceError -> 500
"""

from typing import Any, List, Optional


class GoalError(Exception):
    """목표 관련 예외의 베이스 클래스"""


class InvalidGoalInputError(GoalError):
    """입력값 검증 실패"""

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class GoalNotFoundError(GoalError):
    """목표가 없거나 요청한 사용자의 목표가 아님"""

    def __init__(self, goal_id: str):
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


class GoalPersistenceError(GoalError):
    """DB 읽기/쓰기 실패"""


class CorruptGoalDataError(GoalPersistenceError):
    """DB에 저장된 JSON 데이터가 스키마와 맞지 않음"""

    def __init__(self, goal_id: Optional[str], field: str, cause: Exception):
        super().__init__(f"Stored {field} for goal {goal_id} is malformed: {cause}")
        self.goal_id = goal_id
        self.field = field


class MilestoneGenerationError(GoalError):
    """외부 마일스톤 생성 실패 (항상 기본 마일스톤으로 대체됨)"""
