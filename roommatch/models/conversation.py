from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, UniqueConstraint

from roommatch.database import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)

    # Canonical pair: user1_id is always the smaller id.
    user1_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user2_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    last_message_at = Column(DateTime(timezone=True), nullable=False)
    unread_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_conversations_user_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_conversations_canonical_pair"),
    )
