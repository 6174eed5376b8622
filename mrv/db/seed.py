"""
Optional development seeding script.
"""

import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncSession

from mrv.core.database import init_db, session_scope
from mrv.handlers.ingestion import ingest_document
from mrv.handlers.organizations import upsert_profile
from mrv.handlers.verification import create_verification
from mrv.models.document import ExtractedData
from mrv.models.organization import OrganizationProfileCreate
from mrv.models.subject import Subject
from mrv.models.verification import VerificationRequest

logger = logging.getLogger(__name__)

DEMO_USER_ID = "demo-user"

# Pune MSME: diesel genset, grid power, and a steel purchase
SAMPLE_DOCUMENTS = [
    {
        "documentType": "fuel_invoice",
        "vendor": "Indian Oil Corporation",
        "invoiceNumber": "IOC-2026-0142",
        "amount": 95000,
        "currency": "INR",
        "confidence": 0.93,
        "lineItems": [
            {
                "description": "High Speed Diesel",
                "hsn_code": "27101943",
                "quantity": 1000,
                "unit": "litre",
                "productCategory": "FUEL",
                "scope": 1,
                "co2Kg": 2680,
                "emissionFactor": 2.68,
                "factorSource": "IND_EF_2025",
                "classificationMethod": "HSN",
            }
        ],
    },
    {
        "documentType": "electricity_bill",
        "vendor": "MSEDCL",
        "invoiceNumber": "MSEDCL-88213",
        "amount": 48000,
        "currency": "INR",
        "confidence": 0.9,
        "lineItems": [
            {
                "description": "Grid electricity, industrial tariff",
                "quantity": 6000,
                "unit": "kWh",
                "productCategory": "ELECTRICITY",
                "co2Kg": 4920,
                "emissionFactor": 0.82,
                "factorSource": "CEA CO2 Baseline v19",
                "classificationMethod": "KEYWORD",
            }
        ],
    },
    {
        "documentType": "purchase_invoice",
        "vendor": "JSW Steel",
        "invoiceNumber": "JSW-55120",
        "amount": 310000,
        "currency": "INR",
        "confidence": 0.88,
        "lineItems": [
            {
                "description": "HR coil",
                "hsn_code": "72083990",
                "quantity": 2000,
                "unit": "kg",
                "productCategory": "RAW_MATERIAL",
                "co2Kg": 4100,
                "emissionFactor": 2.05,
                "factorSource": "IND_EF_2025",
                "classificationMethod": "HSN",
            }
        ],
    },
]


async def seed_data(session: AsyncSession, user_id: str = DEMO_USER_ID):
    """Seed a demo user with documents, a profile and one verification run."""
    subject = Subject(user_id=user_id)

    for payload in SAMPLE_DOCUMENTS:
        document, records = await ingest_document(
            session, ExtractedData.model_validate(payload), subject
        )
        logger.info(f"Seeded document {document.id} with {len(records)} records")

    await upsert_profile(
        session,
        user_id,
        OrganizationProfileCreate(
            country="IN",
            size="large",
            exports_to_eu=True,
            seeking_finance=True,
            sector="steel",
        ),
    )

    run = await create_verification(session, subject, VerificationRequest(include_iot=True))
    logger.info(f"Seeded verification {run.id}: {run.status.value}, score {run.score:.4f}")
    return run


async def main():
    await init_db()
    async with session_scope() as session:
        await seed_data(session)
    logger.info("Seed data created successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
