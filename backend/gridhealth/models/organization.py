"""Organization and license models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gridhealth.db.database import Base


class LicenseStatus(str, Enum):
    """Lifecycle status of a license key."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class Organization(Base):
    """A tenant that owns licenses and, through them, devices."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    subscription_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    device_limit: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class License(Base):
    """License key binding devices to an organization's subscription."""

    __tablename__ = "licenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    license_key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    organization_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("organizations.id"), index=True
    )
    status: Mapped[str] = mapped_column(String(20), default=LicenseStatus.ACTIVE.value)
    tier: Mapped[str | None] = mapped_column(String(30), nullable=True)
    device_limit: Mapped[int] = mapped_column(Integer, default=0)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __init__(self, **kwargs):
        kwargs.setdefault("status", LicenseStatus.ACTIVE.value)
        kwargs.setdefault("device_limit", 0)
        super().__init__(**kwargs)
