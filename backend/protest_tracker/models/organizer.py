"""
Organizer account: owns protest listings and authenticates with email + password.

Only the bcrypt digest of the password is stored. `followers` and
`social_clicks` are counters that never go below zero.
"""

from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from protest_tracker.db.base import Base, TimestampMixin


class Organizer(Base, TimestampMixin):
    __tablename__ = "organizers"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    followers = Column(Integer, nullable=False, default=0, server_default="0")
    social_clicks = Column(Integer, nullable=False, default=0, server_default="0")

    protests = relationship(
        "Protest",
        back_populates="organizer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("followers >= 0", name="check_followers_non_negative"),
        CheckConstraint("social_clicks >= 0", name="check_social_clicks_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Organizer(id={self.id}, email={self.email})>"
