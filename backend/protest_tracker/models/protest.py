"""
Protest listing owned by exactly one organizer.

- Deleting the organizer deletes their protests (ON DELETE CASCADE)
- Coordinates are fixed-precision decimals with 7 fractional digits
- `tags` is a Postgres text[]; other backends store it as JSON
- Composite index on (date, time) backs the chronological listings
"""

from sqlalchemy import JSON, CheckConstraint, Column, Date, ForeignKey, Index, Integer, Numeric, String, Text, Time
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship

from protest_tracker.db.base import Base, TimestampMixin

TagList = JSON().with_variant(ARRAY(Text), "postgresql")


class Protest(Base, TimestampMixin):
    __tablename__ = "protests"

    id = Column(Integer, primary_key=True)
    organizer_id = Column(
        Integer,
        ForeignKey("organizers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    cause = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    latitude = Column(Numeric(10, 7), nullable=True)
    longitude = Column(Numeric(10, 7), nullable=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    official_link = Column(String(255), nullable=True)
    tags = Column(TagList, nullable=True)
    likes = Column(Integer, nullable=False, default=0, server_default="0")

    organizer = relationship("Organizer", back_populates="protests")

    __table_args__ = (
        CheckConstraint("likes >= 0", name="check_likes_non_negative"),
        Index("ix_protests_date_time", "date", "time"),
    )

    def __repr__(self) -> str:
        return f"<Protest(id={self.id}, name={self.name}, date={self.date})>"
