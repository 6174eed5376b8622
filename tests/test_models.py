"""
test_models.py: ExtractedData parsing and the VerificationReport contract
"""

from mrv.engine.scorer import score_records
from mrv.models.document import ExtractedData, LineItem
from mrv.models.enums import ClassificationMethod
from mrv.models.verification import VerificationReport


class TestExtractedData:

    def test_total_co2_fallback_order(self):
        assert ExtractedData.model_validate({"totalCO2Kg": 120, "estimatedCO2Kg": 90}).resolved_total_co2_kg() == 120
        assert ExtractedData.model_validate({"estimatedCO2Kg": 90}).resolved_total_co2_kg() == 90
        assert ExtractedData.model_validate({}).resolved_total_co2_kg() == 0

    def test_camel_case_and_snake_case_accepted(self):
        camel = ExtractedData.model_validate({"documentType": "bill", "lineItems": [{"co2Kg": 5}]})
        snake = ExtractedData.model_validate({"document_type": "bill", "line_items": [{"co2_kg": 5}]})
        assert camel == snake
        assert camel.line_items[0].co2_kg == 5

    def test_line_item_scope_parsing(self):
        assert LineItem.model_validate({"scope": "Scope 2"}).scope == 2
        assert LineItem.model_validate({"scope": 3}).scope == 3
        assert LineItem.model_validate({"scope": "scope five"}).scope is None
        assert LineItem.model_validate({"scope": 9}).scope is None

    def test_classification_method_normalised(self):
        assert LineItem.model_validate({"classificationMethod": "hsn"}).classification_method == ClassificationMethod.HSN
        assert LineItem.model_validate({"classificationMethod": "magic"}).classification_method == ClassificationMethod.UNVERIFIABLE
        assert LineItem.model_validate({}).classification_method == ClassificationMethod.UNVERIFIABLE

    def test_hsn_code_keeps_snake_case_key(self):
        assert LineItem.model_validate({"hsn_code": "2710"}).hsn_code == "2710"


class TestVerificationReport:

    def test_report_contract_keys(self, make_record):
        report = VerificationReport.from_run(score_records([make_record(co2_kg=2650.0)]))
        payload = report.model_dump(mode="json", by_alias=True)

        for key in ("totalCo2Kg", "greenwashingRisk", "scopeBreakdown", "greenScore",
                    "creditEligibility", "cctsEligible", "cbamCompliant", "recommendations", "flags"):
            assert key in payload
        assert payload["scopeBreakdown"] == {"scope1": 2650.0, "scope2": 0.0, "scope3": 0.0}
        assert payload["creditEligibility"]["eligibleCredits"] == 2
        assert payload["creditEligibility"]["qualityGrade"] == "A"
        assert payload["methodology"]["id"] == "BIOCOG_MVR_INDIA"
        assert payload["status"] == "verified"
