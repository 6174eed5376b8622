"""
Monetization pathways for a verified run.

Fixed rates and fixed partners only; the same run always yields the same
pathways and values.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from mrv.core.constants import (
    CARBON_PRICE_INR_PER_TONNE,
    GREEN_LOAN_PRINCIPAL_INR,
    GREEN_LOAN_RATE_REDUCTION_PCT,
    KG_PER_TONNE,
    MIN_CREDIT_SALE_VALUE_INR,
    MIN_SCHEME_BENEFIT_INR,
)
from mrv.core.errors import MonetizationError
from mrv.models.contracts import MonetizationPathway, MonetizationReport
from mrv.models.enums import VerificationStatus

logger = logging.getLogger(__name__)

CARBON_BUYER = "IEX Green Market"
GREEN_LOAN_PARTNER = "SIDBI Green Loan"


@dataclass(frozen=True)
class IncentiveScheme:
    name: str
    max_subsidy_inr: int
    subsidy_rate: float  # fraction of carbon credit value
    description: str
    eligibility: str


GOVERNMENT_SCHEMES = [
    IncentiveScheme(
        "MSME ZED Certification Subsidy", 500_000, 0.8,
        "Up to 80% subsidy for ZED certification",
        "MSMEs with verified carbon data",
    ),
    IncentiveScheme(
        "BEE Energy Audit Subsidy", 250_000, 0.5,
        "Subsidy for energy efficiency improvements",
        "Energy-intensive MSMEs",
    ),
    IncentiveScheme(
        "State Green Manufacturing Incentive", 1_000_000, 1.5,
        "Capital subsidy for clean technology adoption",
        "Manufacturing units with carbon verification",
    ),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_monetization(run) -> MonetizationReport:
    """
    Build monetization pathways for a verification run.

    Args:
        run: VerificationRun (or scorer output) with status, total_co2_kg,
            score, ccts_eligible and cbam_compliant

    Returns:
        MonetizationReport

    Raises:
        MonetizationError: if the run is not verified
    """
    if run.status != VerificationStatus.VERIFIED:
        raise MonetizationError("Only verified emissions can be monetized")

    co2_tonnes = max(run.total_co2_kg or 0.0, 0.0) / KG_PER_TONNE
    credit_value = round_half_up(co2_tonnes * CARBON_PRICE_INR_PER_TONNE)
    pathways: List[MonetizationPathway] = []

    if run.ccts_eligible and credit_value > MIN_CREDIT_SALE_VALUE_INR:
        pathways.append(MonetizationPathway(
            type="carbon_credit",
            name="Carbon Credit Sale",
            partner=CARBON_BUYER,
            estimated_value_inr=credit_value,
            description=f"Sell {co2_tonnes:.2f} tons of verified carbon credits through Exchange",
            eligibility="CCTS eligible",
            timeline="2-4 weeks for listing, 1-2 months for sale",
            requirements=[
                "Verified emission data",
                "CCTS registration",
                "Business documentation",
                "CBAM compliant" if run.cbam_compliant else "CBAM certification pending",
            ],
        ))

    pathways.append(MonetizationPathway(
        type="green_loan",
        name="Green Loan Benefits",
        partner=GREEN_LOAN_PARTNER,
        estimated_value_inr=round_half_up(GREEN_LOAN_PRINCIPAL_INR * GREEN_LOAN_RATE_REDUCTION_PCT / 100),
        description=f"Get {GREEN_LOAN_RATE_REDUCTION_PCT}% lower interest rate on business loans",
        eligibility="Based on verified carbon footprint",
        timeline="Standard loan processing time",
        requirements=[
            "Carbon verification certificate",
            "Standard loan documentation",
            "Business financials",
        ],
    ))

    for scheme in GOVERNMENT_SCHEMES:
        benefit = min(scheme.max_subsidy_inr, round_half_up(credit_value * scheme.subsidy_rate))
        if benefit > MIN_SCHEME_BENEFIT_INR:
            pathways.append(MonetizationPathway(
                type="govt_incentive",
                name=scheme.name,
                partner="Government of India",
                estimated_value_inr=benefit,
                description=scheme.description,
                eligibility=scheme.eligibility,
                timeline="1-3 months processing",
                requirements=[
                    "Carbon verification certificate",
                    "MSME registration",
                    "Bank account details",
                    "Application form submission",
                ],
            ))

    total = sum(p.estimated_value_inr for p in pathways)
    logger.info(f"Monetization: {len(pathways)} pathways, total INR {total}, CO2 {co2_tonnes:.2f} t")

    return MonetizationReport(
        run_id=getattr(run, "id", None),
        co2_tonnes=co2_tonnes,
        verification_score=run.score,
        total_potential_value_inr=total,
        carbon_price_inr_per_tonne=CARBON_PRICE_INR_PER_TONNE,
        pathways=pathways,
    )
