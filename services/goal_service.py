"""
목표 서비스 - 목표 생성/조회/마일스톤 갱신 오케스트레이션

모든 호출에 DB 세션과 요청한 사용자 ID를 명시적으로 넘깁니다 (전역 상태 없음).

흐름 (마일스톤 갱신):
1. 입력 검증 (빈 plan 거부)
2. 소유자 확인 (없거나 다른 사용자의 목표면 GoalNotFoundError)
3. 진행률 계산 -> 진행률 기록 갱신 -> 달성 여부 계산
4. 한 번의 커밋으로 저장 (실패 시 롤백)
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.postgres.crud import goal as goal_crud
from services.exceptions import (
    GoalNotFoundError,
    GoalPersistenceError,
    InvalidGoalInputError,
)
from services.milestones import MilestoneGenerator, resolve_milestones
from services.progress import (
    calculate_progress,
    is_goal_completed,
    summarize_goals,
    update_progress_log,
)
from services.schemas import (
    GoalRecord,
    GoalSummary,
    Milestone,
    dump_plan,
    dump_progress_log,
    to_goal_record,
)

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 255

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validation_details(error: ValidationError) -> List[dict]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in error.errors()
    ]


def parse_target_date(value: Union[date, str, None]) -> Optional[date]:
    """목표 기한 파싱 (None, date, ISO 날짜/일시 문자열 허용)"""
    if value is None or isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise InvalidGoalInputError(
            "Invalid input",
            [{"loc": ["targetDate"], "msg": f"Invalid date: {value!r}", "type": "date_parsing"}],
        ) from e


def validate_title(title: Any) -> str:
    """제목 검증 (공백 제거 후 3자 이상)"""
    if not isinstance(title, str):
        raise InvalidGoalInputError(
            "Invalid input",
            [{"loc": ["title"], "msg": "Goal title must be a string", "type": "string_type"}],
        )
    cleaned = title.strip()
    if len(cleaned) < MIN_TITLE_LENGTH:
        raise InvalidGoalInputError(
            "Invalid input",
            [{
                "loc": ["title"],
                "msg": f"Goal title must be at least {MIN_TITLE_LENGTH} characters",
                "type": "string_too_short",
            }],
        )
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise InvalidGoalInputError(
            "Invalid input",
            [{
                "loc": ["title"],
                "msg": f"Goal title must be at most {MAX_TITLE_LENGTH} characters",
                "type": "string_too_long",
            }],
        )
    return cleaned


def validate_plan(plan: Iterable[Any]) -> List[Milestone]:
    """마일스톤 리스트 검증 (최소 1개)"""
    try:
        milestones = [
            item if isinstance(item, Milestone) else Milestone.model_validate(item)
            for item in plan
        ]
    except ValidationError as e:
        raise InvalidGoalInputError("Invalid input", _validation_details(e)) from e
    if not milestones:
        raise InvalidGoalInputError(
            "Invalid input",
            [{"loc": ["plan"], "msg": "Plan must have at least one milestone.", "type": "too_short"}],
        )
    return milestones


class GoalService:
    """목표 생성/조회/갱신 서비스"""

    def __init__(
        self,
        milestone_generator: Optional[MilestoneGenerator] = None,
        generation_timeout: float = 15.0,
        clock: Clock = utc_now,
    ):
        """
        Args:
            milestone_generator: 마일스톤 생성기 (None이면 항상 기본 마일스톤 사용)
            generation_timeout: 마일스톤 생성 타임아웃 (초)
            clock: 현재 시각 함수 (UTC aware datetime 반환, 테스트에서 교체)
        """
        self.milestone_generator = milestone_generator
        self.generation_timeout = generation_timeout
        self.clock = clock

    def today(self) -> date:
        """진행률 기록 기준 날짜 (UTC)"""
        return self.clock().astimezone(timezone.utc).date()

    async def create_goal(
        self,
        db: Session,
        user_id: str,
        title: Any,
        target_date: Union[date, str, None] = None,
    ) -> GoalRecord:
        """
        새 목표 생성

        마일스톤 생성이 실패해도 목표 생성은 실패하지 않습니다 (기본 마일스톤 사용).
        입력 검증 실패 또는 DB 오류일 때만 예외가 발생합니다.
        """
        cleaned_title = validate_title(title)
        parsed_target_date = parse_target_date(target_date)

        texts = await resolve_milestones(
            self.milestone_generator,
            cleaned_title,
            timeout=self.generation_timeout,
        )
        plan = [Milestone(text=text, completed=False) for text in texts]

        # 동기 DB 호출은 워커 스레드에서 실행
        return await asyncio.to_thread(
            self._insert_goal, db, user_id, cleaned_title, plan, parsed_target_date
        )

    def _insert_goal(
        self,
        db: Session,
        user_id: str,
        title: str,
        plan: List[Milestone],
        target_date: Optional[date],
    ) -> GoalRecord:
        try:
            db_goal = goal_crud.create_goal(
                db,
                user_id=user_id,
                title=title,
                plan=dump_plan(plan),
                target_date=target_date,
                now=self.clock(),
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("[goals] failed to create goal for user %s", user_id)
            raise GoalPersistenceError("Failed to create goal") from e

        logger.info("[goals] created goal %s for user %s with %d milestones", db_goal.id, user_id, len(plan))
        return to_goal_record(db_goal)

    def get_goal(self, db: Session, goal_id: str, user_id: str) -> GoalRecord:
        """목표 조회 (없거나 다른 사용자의 목표면 GoalNotFoundError)"""
        return to_goal_record(self._load_owned_goal(db, goal_id, user_id))

    def list_goals(self, db: Session, user_id: str) -> List[GoalRecord]:
        """사용자 목표 목록 (최신순)"""
        try:
            db_goals = goal_crud.get_goals_by_user(db, user_id)
        except SQLAlchemyError as e:
            logger.exception("[goals] failed to list goals for user %s", user_id)
            raise GoalPersistenceError("Failed to load goals") from e
        return [to_goal_record(db_goal) for db_goal in db_goals]

    def summarize(self, db: Session, user_id: str) -> GoalSummary:
        """사용자 목표 요약"""
        return summarize_goals(self.list_goals(db, user_id))

    def update_plan(
        self,
        db: Session,
        goal_id: str,
        user_id: str,
        plan: Iterable[Any],
    ) -> GoalRecord:
        """
        마일스톤 전체 교체

        progress, progress_log, completed는 서버에서 다시 계산하며
        클라이언트가 보낸 값은 사용하지 않습니다.
        """
        milestones = validate_plan(plan)
        db_goal = self._load_owned_goal(db, goal_id, user_id)
        current = to_goal_record(db_goal)

        now = self.clock()
        progress = calculate_progress(milestones)
        progress_log = update_progress_log(current.progress_log, progress, self.today())
        completed = is_goal_completed(milestones)

        try:
            db_goal = goal_crud.update_goal_plan(
                db,
                db_goal,
                plan=dump_plan(milestones),
                progress=progress,
                completed=completed,
                progress_log=dump_progress_log(progress_log),
                now=now,
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("[goals] failed to update goal %s", goal_id)
            raise GoalPersistenceError("Failed to update goal") from e

        logger.info("[goals] updated goal %s: progress=%d%% completed=%s", goal_id, progress, completed)
        return to_goal_record(db_goal)

    def _load_owned_goal(self, db: Session, goal_id: str, user_id: str):
        try:
            db_goal = goal_crud.get_user_goal(db, goal_id, user_id)
        except SQLAlchemyError as e:
            logger.exception("[goals] failed to load goal %s", goal_id)
            raise GoalPersistenceError("Failed to load goal") from e
        if db_goal is None:
            raise GoalNotFoundError(goal_id)
        return db_goal
