"""
ORM models. Importing this package registers every table on Base.metadata,
which Alembic autogenerate and the test fixtures rely on.
"""

from barrelverse.models.course import Course
from barrelverse.models.experience import Experience
from barrelverse.models.purchase import Purchase
from barrelverse.models.session import UserSession
from barrelverse.models.user import User

__all__ = ["Course", "Experience", "Purchase", "User", "UserSession"]
