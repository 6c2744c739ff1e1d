from database.postgres.crud import goal

__all__ = ["goal"]
