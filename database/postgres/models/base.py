"""
SQLAlchemy Declarative Base
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
