"""
목표 진행률 계산 로직

모두 순수 함수입니다. DB나 시계에 의존하지 않으므로 "오늘" 날짜는 호출자가 넘깁니다.
"""

from datetime import date
from typing import Iterable, List, Sequence

from services.schemas import GoalRecord, GoalSummary, Milestone, ProgressEntry


def _round_half_up(numerator: int, denominator: int) -> int:
    """정수 연산으로 반올림 (0.5는 올림, 예: 12.5 -> 13)"""
    return (2 * numerator + denominator) // (2 * denominator)


def calculate_progress(plan: Sequence[Milestone]) -> int:
    """
    완료된 마일스톤 비율을 0~100 정수로 계산

    Args:
        plan: 마일스톤 리스트 (비어 있으면 안 됨)

    Returns:
        진행률 (예: 3개 중 1개 완료 -> 33, 3개 중 2개 완료 -> 67)

    Raises:
        ValueError: plan이 비어 있는 경우 (상위 검증에서 걸러져야 함)
    """
    total = len(plan)
    if total == 0:
        raise ValueError("calculate_progress() requires a non-empty plan")
    done = sum(1 for milestone in plan if milestone.completed)
    return _round_half_up(100 * done, total)


def is_goal_completed(plan: Sequence[Milestone]) -> bool:
    """마일스톤이 하나 이상 있고 모두 완료되었으면 True"""
    return len(plan) > 0 and all(milestone.completed for milestone in plan)


def update_progress_log(
    log: Iterable[ProgressEntry],
    percent: int,
    today: date,
) -> List[ProgressEntry]:
    """
    진행률 기록 갱신

    - 오늘 날짜 기록이 있으면 percent만 교체 (마지막 값이 남음)
    - 없으면 새 기록 추가
    - 결과는 날짜 오름차순 정렬

    입력 리스트는 변경하지 않고 새 리스트를 반환합니다.
    """
    entries = {}
    for entry in log:
        entries[entry.date] = entry
    entries[today] = ProgressEntry(date=today, percent=percent)
    return sorted(entries.values(), key=lambda entry: entry.date)


def summarize_goals(goals: Sequence[GoalRecord]) -> GoalSummary:
    """목표 리스트 요약 (전체/완료/진행 중 개수, 평균 진행률)"""
    total = len(goals)
    completed = sum(1 for goal in goals if goal.completed)
    average = _round_half_up(sum(goal.progress for goal in goals), total) if total else 0
    return GoalSummary(
        total=total,
        completed=completed,
        in_progress=total - completed,
        average_progress=average,
    )
