"""
test_scorer.py: verification score, status bands, risk, flags and recommendations
"""

import pytest

from mrv.engine.scorer import (
    FLAG_CATALOGUE,
    ScoringThresholds,
    compute_green_score,
    effective_quality,
    score_records,
)
from mrv.models.enums import (
    ClassificationMethod,
    DataQuality,
    EmissionCategory,
    GreenwashingRisk,
    QualityGrade,
    VerificationStatus,
)


class TestScoreRecords:

    def test_well_documented_batch_verifies(self, make_record):
        run = score_records([make_record(id=1), make_record(id=2)])
        # 0.40 * 0.95 + 0.35 * 1.0 + 0.25 * 1.0
        assert run.score == pytest.approx(0.98)
        assert run.status == VerificationStatus.VERIFIED
        assert run.greenwashing_risk == GreenwashingRisk.LOW
        assert run.quality_grade == QualityGrade.A
        assert run.data_quality == DataQuality.HIGH
        assert run.ccts_eligible is True
        assert run.cbam_compliant is True
        assert run.flags == []
        assert run.emission_ids == [1, 2]

    def test_empty_batch_is_no_data_not_rejected(self):
        run = score_records([])
        assert run.status == VerificationStatus.NO_DATA
        assert run.score == 0
        assert run.total_co2_kg == 0
        assert run.quality_grade == QualityGrade.D
        assert run.flags == [FLAG_CATALOGUE["NO_RECORDS"].label]
        assert run.ccts_eligible is False

    def test_missing_provenance_degrades_but_scores(self, make_record):
        record = make_record(activity_data=None, emission_factor=None, confidence=None)
        run = score_records([record])
        # high -> medium (0.7 confidence), HSN, no provenance
        assert run.score == pytest.approx(0.63)
        assert run.status == VerificationStatus.NEEDS_REVIEW
        assert run.data_quality == DataQuality.MEDIUM
        assert run.greenwashing_risk == GreenwashingRisk.MEDIUM
        assert "Missing activity data" in run.flags
        assert "Emission factor source not cited" in run.flags

    def test_unverifiable_low_confidence_is_rejected(self, make_record):
        record = make_record(
            classification_method=ClassificationMethod.UNVERIFIABLE,
            confidence=0.3,
            activity_data=None,
            emission_factor=None,
        )
        run = score_records([record])
        assert run.score == pytest.approx(0.12)
        assert run.status == VerificationStatus.REJECTED
        assert run.greenwashing_risk == GreenwashingRisk.HIGH
        assert "Confidence below 0.5" in run.flags
        assert run.eligible_credits == 0

    def test_material_unverifiable_record_is_high_risk(self, make_record):
        records = [
            make_record(co2_kg=700.0),
            make_record(co2_kg=300.0, classification_method=ClassificationMethod.UNVERIFIABLE),
        ]
        run = score_records(records)
        assert run.greenwashing_risk == GreenwashingRisk.HIGH
        assert FLAG_CATALOGUE["UNVERIFIABLE_MATERIAL"].label in run.flags
        assert run.cbam_compliant is False

    def test_small_unverifiable_share_is_mixed_methodology(self, make_record):
        records = [
            make_record(co2_kg=900.0),
            make_record(co2_kg=100.0, classification_method=ClassificationMethod.UNVERIFIABLE),
        ]
        run = score_records(records)
        assert run.greenwashing_risk == GreenwashingRisk.MEDIUM
        assert FLAG_CATALOGUE["UNVERIFIABLE_MATERIAL"].label not in run.flags

    def test_reduction_claim_without_baseline(self, make_record):
        run = score_records([make_record()], reduction_claimed=True)
        assert run.greenwashing_risk == GreenwashingRisk.HIGH
        assert "Missing baseline" in run.flags

        documented = score_records([make_record()], reduction_claimed=True, baseline_documented=True)
        assert documented.greenwashing_risk == GreenwashingRisk.LOW
        assert "Missing baseline" not in documented.flags

    def test_iot_reduces_net_emissions(self, make_record):
        run = score_records([make_record(co2_kg=1000.0)], include_iot=True)
        assert run.total_co2_kg == pytest.approx(1000.0)
        assert run.verified_reductions_kg == pytest.approx(50.0)
        assert run.net_emissions_kg == pytest.approx(950.0)
        assert run.green_score == 55

        plain = score_records([make_record(co2_kg=1000.0)])
        assert plain.net_emissions_kg == pytest.approx(1000.0)
        assert plain.green_score == 50

    def test_injected_green_score_replaces_formula(self, make_record):
        assert score_records([make_record()], green_score=88).green_score == 88
        assert score_records([make_record()], green_score=150).green_score == 100

    def test_thresholds_are_configurable(self, make_record):
        strict = ScoringThresholds(verified=0.99, review=0.5)
        run = score_records([make_record()], thresholds=strict)
        assert run.status == VerificationStatus.NEEDS_REVIEW

    def test_invalid_thresholds_rejected(self):
        with pytest.raises(ValueError):
            ScoringThresholds(verified=0.4, review=0.6)

    def test_scope_breakdown_sums_to_total(self, make_record):
        records = [
            make_record(scope=1, co2_kg=120.25),
            make_record(scope=2, category=EmissionCategory.ELECTRICITY, co2_kg=80.5),
            make_record(scope=3, category=EmissionCategory.MATERIALS, co2_kg=33.125),
        ]
        run = score_records(records)
        assert abs(run.scope1_kg + run.scope2_kg + run.scope3_kg - run.total_co2_kg) < 1e-6

    def test_scope_conflict_and_abnormal_quantity_flags(self, make_record):
        records = [make_record(scope_conflict=True), make_record(activity_data=2_000_000)]
        run = score_records(records)
        assert "Conflicting scope signals" in run.flags
        assert "Abnormal activity quantity" in run.flags


class TestRecommendations:

    def test_one_recommendation_per_flag_plus_scope_tip(self, make_record):
        record = make_record(activity_data=None, activity_unit=None)
        run = score_records([record])
        assert len(run.flags) == 2
        assert len(run.recommendations) == 3
        assert run.recommendations[0] == FLAG_CATALOGUE["MISSING_ACTIVITY_DATA"].recommendation
        assert "fuel switching" in run.recommendations[-1]

    def test_scope_2_dominant_suggests_recs(self, make_record):
        records = [
            make_record(scope=2, category=EmissionCategory.ELECTRICITY, co2_kg=800.0),
            make_record(scope=1, co2_kg=200.0),
        ]
        run = score_records(records)
        assert any("renewable energy certificates" in r for r in run.recommendations)

    def test_no_dominant_scope_no_tip(self, make_record):
        records = [
            make_record(scope=1, co2_kg=50.0),
            make_record(scope=2, category=EmissionCategory.ELECTRICITY, co2_kg=50.0),
        ]
        assert score_records(records).recommendations == []


class TestHelpers:

    def test_green_score_formula(self):
        assert compute_green_score(0, 0, 0) == 0
        assert compute_green_score(100, 0, 0) == 50
        assert compute_green_score(0, 100, 0) == 70
        assert compute_green_score(0, 0, 100) == 80
        assert compute_green_score(25, 25, 50) == 70
        assert compute_green_score(0, 0, 100, reductions=100) == 100

    def test_effective_quality_downgrades_once(self, make_record):
        assert effective_quality(make_record()) == DataQuality.HIGH
        assert effective_quality(make_record(emission_factor=None)) == DataQuality.MEDIUM
        assert effective_quality(
            make_record(emission_factor=None, data_quality=DataQuality.LOW)
        ) == DataQuality.LOW

    def test_catalogue_severities(self):
        for code, flag in FLAG_CATALOGUE.items():
            assert flag.severity in ("high", "medium", "low"), f"{code} has invalid severity"
            assert flag.recommendation
