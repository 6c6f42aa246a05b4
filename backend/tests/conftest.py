from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import gridhealth.models  # noqa: F401  registers tables on Base.metadata
from gridhealth.db.database import Base, get_session
from gridhealth.main import app
from gridhealth.models import Device, HealthMetric, License, Organization


@pytest_asyncio.fixture
async def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    """HTTP client with test database"""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def worked_example_scan():
    """CPU 95%, memory 50%, disks 10%/30% free, one critical service."""
    return {
        "metric_type": "health_check",
        "performance_metrics": {"cpu_usage_percent": 95, "memory_usage_percent": 50},
        "disk_health": [
            {"drive_letter": "C", "free_space_percent": 10},
            {"drive_letter": "D", "free_space_percent": 30},
        ],
        "service_health": [
            {"name": "Spooler", "status": "critical"},
            {"name": "W32Time", "status": "ok"},
        ],
        "security_health": {"vulnerabilities": []},
    }


@pytest_asyncio.fixture
async def seeded_fleet(db_session, worked_example_scan):
    """Two organizations, three licenses, four devices and some telemetry.

    org-1 owns LIC-1 (active: dev-1, dev-2) and LIC-2 (revoked: dev-3).
    org-2 owns LIC-3 (active: dev-4).
    dev-1 is online with a health check scoring 57; dev-2 went quiet an hour
    ago and has a health scan storing 88.
    """
    now = datetime.now(tz=timezone.utc)

    db_session.add_all(
        [
            Organization(
                id="org-1", name="Acme Clinics", subscription_status="active", device_limit=10
            ),
            Organization(id="org-2", name="Beta Labs", subscription_status="trial", device_limit=2),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            License(license_key="LIC-1", organization_id="org-1", tier="pro", device_limit=5),
            License(license_key="LIC-2", organization_id="org-1", status="revoked"),
            License(license_key="LIC-3", organization_id="org-2"),
        ]
    )
    db_session.add_all(
        [
            Device(
                device_id="dev-1",
                license_key="LIC-1",
                device_name="Front Desk",
                hostname="fd-01",
                os_name="Windows",
                os_version="11",
                last_seen=now,
            ),
            Device(device_id="dev-2", license_key="LIC-1", last_seen=now - timedelta(hours=1)),
            Device(device_id="dev-3", license_key="LIC-2", last_seen=now),
            Device(device_id="dev-4", license_key="LIC-3", last_seen=now),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            HealthMetric(
                device_id="dev-1",
                metric_type="heartbeat",
                timestamp=now - timedelta(minutes=1),
                value=1,
            ),
            HealthMetric(
                device_id="dev-1",
                metric_type="health_check",
                timestamp=now - timedelta(minutes=10),
                performance_metrics=worked_example_scan["performance_metrics"],
                disk_health=worked_example_scan["disk_health"],
                service_health=worked_example_scan["service_health"],
                security_health=worked_example_scan["security_health"],
            ),
            HealthMetric(
                device_id="dev-1",
                metric_type="health_check",
                timestamp=now - timedelta(days=40),
                performance_metrics={"cpu_usage_percent": 5},
            ),
            HealthMetric(
                device_id="dev-2",
                metric_type="health_scan",
                timestamp=now - timedelta(hours=2),
                value=88,
                network_health={"internet_connectivity": True},
            ),
        ]
    )
    await db_session.commit()
    return now
