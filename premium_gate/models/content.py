from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from premium_gate.db.base import Base


class ContentItem(Base):
    __tablename__ = "content_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    title = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    body = Column(Text, nullable=False, default="")

    # Gating fields: written only by the release scheduler / processor.
    is_premium = Column(Boolean, nullable=False, default=False)
    premium_release_date = Column(DateTime(timezone=True), nullable=True, index=True)
    is_permanent_premium = Column(Boolean, nullable=False, default=False)
    # Set when the processor flips the item to free; premium_release_date is kept alongside it.
    premium_released_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    zone_settings = relationship(
        "ContentZoneSetting",
        back_populates="content",
        order_by="ContentZoneSetting.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ContentZoneSetting(Base):
    __tablename__ = "content_zone_settings"
    __table_args__ = (UniqueConstraint("content_id", "zone", name="uq_content_zone"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    content_id = Column(
        String,
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    zone = Column(String, nullable=False)  # READ | COACH | PLAYER | PARENT | SERIES
    position = Column(Integer, nullable=False, default=0)
    visible = Column(Boolean, nullable=False, default=True)
    requires_subscription = Column(Boolean, nullable=False, default=False)
    free_after_date = Column(DateTime(timezone=True), nullable=True)

    content = relationship("ContentItem", back_populates="zone_settings")
