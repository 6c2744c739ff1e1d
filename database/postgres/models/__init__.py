from database.postgres.models.base import Base
from database.postgres.models.goal import Goal

__all__ = ["Base", "Goal"]
