"""
Shared fixtures: an in-memory database per test, an API client bound to it,
and factories for emission records and verification runs.
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from mrv.core.database import build_engine, get_session, init_db
from mrv.models.emission import EmissionRecord
from mrv.models.enums import (
    ClassificationMethod,
    DataQuality,
    EmissionCategory,
    GreenwashingRisk,
    QualityGrade,
    VerificationStatus,
)
from mrv.models.verification import VerificationRun


@pytest_asyncio.fixture
async def engine():
    test_engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db_session:
        yield db_session


@pytest_asyncio.fixture
async def client(session_maker):
    async def _get_test_session():
        async with session_maker() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _get_test_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_record():
    """Factory for a fully documented Scope 1 fuel record; override any field."""
    def _make(**overrides):
        fields = dict(
            scope=1,
            category=EmissionCategory.FUEL,
            co2_kg=100.0,
            activity_data=37.3,
            activity_unit="litre",
            emission_factor=2.68,
            factor_source="IND_EF_2025",
            data_quality=DataQuality.HIGH,
            classification_method=ClassificationMethod.HSN,
            confidence=0.95,
            scope_conflict=False,
            created_at=datetime(2026, 10, 1, 9, 30),
        )
        fields.update(overrides)
        return EmissionRecord(**fields)
    return _make


@pytest.fixture
def make_run():
    """Factory for a stored-shape verification run."""
    def _make(**overrides):
        fields = dict(
            total_co2_kg=1000.0,
            score=0.9,
            status=VerificationStatus.VERIFIED,
            greenwashing_risk=GreenwashingRisk.LOW,
            green_score=50,
            eligible_credits=1,
            carry_forward=0.0,
            quality_grade=QualityGrade.A,
        )
        fields.update(overrides)
        return VerificationRun(**fields)
    return _make


@pytest.fixture
def fuel_invoice():
    """Factory for an ExtractedData payload (camelCase) for a well-documented diesel invoice."""
    def _make(**overrides):
        payload = {
            "documentType": "fuel_invoice",
            "vendor": "Indian Oil Corporation",
            "invoiceNumber": "IOC-2026-0142",
            "amount": 95000,
            "currency": "INR",
            "confidence": 0.95,
            "lineItems": [
                {
                    "description": "High Speed Diesel",
                    "hsn_code": "27101943",
                    "quantity": 988.8,
                    "unit": "litre",
                    "productCategory": "FUEL",
                    "co2Kg": 2650,
                    "emissionFactor": 2.68,
                    "factorSource": "IND_EF_2025",
                    "classificationMethod": "HSN",
                }
            ],
        }
        payload.update(overrides)
        return payload
    return _make
