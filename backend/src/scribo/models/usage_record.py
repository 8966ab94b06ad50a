"""Free-tier usage counter model."""
from sqlalchemy import Column, Integer, String

from scribo.models.base import Base


class UserApiLimit(Base):
    """
    Free-tier generation counter, one row per user.

    Incremented after every generation made by a user without an active
    subscription. Rows are never deleted.
    """

    __tablename__ = "user_api_limits"

    user_id = Column(String, nullable=False, unique=True, index=True)
    count = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """String representation."""
        return f"<UserApiLimit(user_id={self.user_id}, count={self.count})>"
