"""Column mixins shared by the workflow and content tables."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.utils.generators import generate_cuid


class CuidMixin:
    """String primary key filled from generate_cuid when the entity has none."""

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    # Bumped by the database on every UPDATE issued through the ORM.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TimestampedModel(CuidMixin, TimestampMixin):
    __abstract__ = True
