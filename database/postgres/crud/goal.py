from sqlalchemy.orm import Session
from database.postgres.models import Goal
from datetime import date, datetime, timezone
from typing import List, Optional

# Goal CRUD operations
def create_goal(
    db: Session,
    user_id: str,
    title: str,
    plan: List[dict],
    target_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Goal:
    """새로운 목표를 생성합니다. 진행률 0, 미완료, 빈 기록으로 시작합니다."""
    created_at = now or datetime.now(timezone.utc)
    db_goal = Goal(
        user_id=user_id,
        title=title,
        target_date=target_date,
        plan=plan,
        progress=0,
        completed=False,
        progress_log=[],
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal

def get_goal(db: Session, goal_id: str) -> Optional[Goal]:
    """ID로 목표를 조회합니다."""
    return db.query(Goal).filter(Goal.id == goal_id).first()

def get_user_goal(db: Session, goal_id: str, user_id: str) -> Optional[Goal]:
    """ID와 소유자로 목표를 조회합니다. 다른 사용자의 목표는 None."""
    return db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id).first()

def get_goals_by_user(db: Session, user_id: str, skip: int = 0, limit: Optional[int] = None) -> List[Goal]:
    """사용자의 목표를 최신순으로 조회합니다. limit이 None이면 전부 반환합니다."""
    query = (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .order_by(Goal.created_at.desc(), Goal.id.desc())
        .offset(skip)
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def update_goal_plan(
    db: Session,
    db_goal: Goal,
    plan: List[dict],
    progress: int,
    completed: bool,
    progress_log: List[dict],
    now: Optional[datetime] = None,
) -> Goal:
    """마일스톤 전체를 교체하고 파생 값을 한 번의 커밋으로 저장합니다."""
    db_goal.plan = plan
    db_goal.progress = progress
    db_goal.completed = completed
    db_goal.progress_log = progress_log
    db_goal.updated_at = now or datetime.now(timezone.utc)
    db.commit()
    db.refresh(db_goal)
    return db_goal
