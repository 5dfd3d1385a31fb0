from sqlalchemy import Column, Integer, ForeignKey, Text, DateTime, func, Index
from sqlalchemy.orm import relationship

from models.base import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)

    report_id = Column(
        Integer,
        ForeignKey("flood_reports.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    text = Column(Text, nullable=False)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    report = relationship("FloodReport", back_populates="comments")
    user = relationship("User", back_populates="comments", lazy="selectin")

    __table_args__ = (
        Index("ix_comments_report_id_timestamp", "report_id", "timestamp"),
    )
