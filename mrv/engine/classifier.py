"""
Category and scope classification for extracted line items.

Fully table-driven: adding a category token, HSN chapter or legacy alias is a
table edit. Classification never fails; unknown input resolves to `other` /
Scope 3.
"""

from dataclasses import dataclass
from typing import Optional

from mrv.models.enums import EmissionCategory

# Raw extractor productCategory token -> canonical category
PRODUCT_CATEGORY_MAP = {
    "FUEL": EmissionCategory.FUEL,
    "BIOMASS": EmissionCategory.FUEL,
    "ELECTRICITY": EmissionCategory.ELECTRICITY,
    "TRANSPORT": EmissionCategory.TRANSPORT,
    "TRANSPORT_SERVICES": EmissionCategory.TRANSPORT,
    "LOGISTICS": EmissionCategory.TRANSPORT,
    "RAW_MATERIAL": EmissionCategory.MATERIALS,
    "CHEMICALS": EmissionCategory.MATERIALS,
    "CAPITAL_GOODS": EmissionCategory.MATERIALS,
    "ELECTRICAL_EQUIPMENT": EmissionCategory.MATERIALS,
    "INSTRUMENTS": EmissionCategory.MATERIALS,
    "TRANSPORT_EQUIPMENT": EmissionCategory.MATERIALS,
    "WASTE": EmissionCategory.WASTE,
    "SERVICES": EmissionCategory.OTHER,
}

# Two-digit HSN chapter -> raw productCategory token
HSN_CHAPTER_MAP = {
    "27": "FUEL",
    "10": "BIOMASS",
    "12": "BIOMASS",
    "25": "RAW_MATERIAL",
    "39": "RAW_MATERIAL",
    "40": "RAW_MATERIAL",
    "44": "RAW_MATERIAL",
    "48": "RAW_MATERIAL",
    "52": "RAW_MATERIAL",
    "54": "RAW_MATERIAL",
    "72": "RAW_MATERIAL",
    "73": "RAW_MATERIAL",
    "74": "RAW_MATERIAL",
    "76": "RAW_MATERIAL",
    "28": "CHEMICALS",
    "29": "CHEMICALS",
    "84": "CAPITAL_GOODS",
    "85": "ELECTRICAL_EQUIPMENT",
    "90": "INSTRUMENTS",
    "86": "TRANSPORT_EQUIPMENT",
    "87": "TRANSPORT_EQUIPMENT",
    "88": "TRANSPORT_EQUIPMENT",
    "89": "TRANSPORT_EQUIPMENT",
    "99": "SERVICES",
}

# Legacy free-text emissionCategory -> canonical category
LEGACY_CATEGORY_MAP = {
    "fuel": EmissionCategory.FUEL,
    "fuels": EmissionCategory.FUEL,
    "diesel": EmissionCategory.FUEL,
    "petrol": EmissionCategory.FUEL,
    "lpg": EmissionCategory.FUEL,
    "electricity": EmissionCategory.ELECTRICITY,
    "energy": EmissionCategory.ELECTRICITY,
    "power": EmissionCategory.ELECTRICITY,
    "transport": EmissionCategory.TRANSPORT,
    "transportation": EmissionCategory.TRANSPORT,
    "logistics": EmissionCategory.TRANSPORT,
    "freight": EmissionCategory.TRANSPORT,
    "travel": EmissionCategory.TRANSPORT,
    "materials": EmissionCategory.MATERIALS,
    "raw_materials": EmissionCategory.MATERIALS,
    "purchased_goods": EmissionCategory.MATERIALS,
    "waste": EmissionCategory.WASTE,
    "other": EmissionCategory.OTHER,
}

# Canonical category -> default GHG Protocol scope
CATEGORY_SCOPE = {
    EmissionCategory.FUEL: 1,
    EmissionCategory.ELECTRICITY: 2,
    EmissionCategory.TRANSPORT: 3,
    EmissionCategory.MATERIALS: 3,
    EmissionCategory.WASTE: 3,
    EmissionCategory.OTHER: 3,
}

DEFAULT_SCOPE = 3


@dataclass(frozen=True)
class Classification:
    category: EmissionCategory
    scope: int
    scope_conflict: bool = False


def _normalise_token(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip().upper().replace(" ", "_").replace("-", "_")


def resolve_category(
    product_category: Optional[str] = None,
    emission_category: Optional[str] = None,
    hsn_code: Optional[str] = None,
) -> EmissionCategory:
    """Product token, then HSN chapter, then legacy category, then `other`."""
    token = _normalise_token(product_category)
    if token in PRODUCT_CATEGORY_MAP:
        return PRODUCT_CATEGORY_MAP[token]

    digits = "".join(ch for ch in str(hsn_code or "") if ch.isdigit())
    chapter_token = HSN_CHAPTER_MAP.get(digits[:2]) if len(digits) >= 2 else None
    if chapter_token:
        return PRODUCT_CATEGORY_MAP[chapter_token]

    legacy = _normalise_token(emission_category).lower()
    if legacy in LEGACY_CATEGORY_MAP:
        return LEGACY_CATEGORY_MAP[legacy]

    return EmissionCategory.OTHER


def classify(
    product_category: Optional[str] = None,
    emission_category: Optional[str] = None,
    line_item_scope: Optional[int] = None,
    hsn_code: Optional[str] = None,
) -> Classification:
    """
    Map a raw category token to a canonical category and GHG scope.

    Args:
        product_category: Extractor token such as FUEL or RAW_MATERIAL
        emission_category: Legacy free-text category
        line_item_scope: Scope supplied by the extractor for this line, if any
        hsn_code: HSN/SAC code, used when the token is missing or unknown

    Returns:
        Classification; an explicit valid line-item scope always wins and a
        disagreement with the category default sets `scope_conflict`
    """
    category = resolve_category(product_category, emission_category, hsn_code)
    category_scope = CATEGORY_SCOPE.get(category, DEFAULT_SCOPE)

    if line_item_scope in (1, 2, 3):
        return Classification(
            category=category,
            scope=line_item_scope,
            scope_conflict=line_item_scope != category_scope,
        )
    return Classification(category=category, scope=category_scope)
