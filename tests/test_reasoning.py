from __future__ import annotations

import pytest

from leafguard.core.features import analyze_color_distribution, analyze_texture
from leafguard.core.metrics import compute_health_metrics, detect_indicators
from leafguard.core.policies import RulePolicy
from leafguard.core.reasoning import RuleClassifier, jitter, seed_hash
from leafguard.core.schemas import (
    ColorDistribution,
    DiseaseIndicators,
    FeatureReport,
    HealthMetrics,
    Label,
    TextureMetrics,
)

from conftest import BLACK, BROWN, DARK, GREEN, LIGHT_GREEN, WHITE, YELLOW, buffer_from_rows, solid_buffer


def report_for(buffer) -> FeatureReport:
    colors = analyze_color_distribution(buffer)
    texture = analyze_texture(buffer)
    return FeatureReport(
        colors=colors,
        texture=texture,
        health=compute_health_metrics(colors, texture),
        indicators=detect_indicators(colors, texture),
    )


def make_report(
    colors: dict | None = None,
    edge_density: float = 0.0,
    health: tuple[float, float, float] = (0.5, 0.5, 0.2),
    **indicators: bool,
) -> FeatureReport:
    c = dict(healthy=0.0, yellowing=0.0, browning=0.0, spotting=0.0, mildew=0.0)
    c.update(colors or {})
    flags = dict(
        fungal_signs=False,
        bacterial_signs=False,
        viral_signs=False,
        pest_damage=False,
        nutritional_deficiency=False,
    )
    flags.update(indicators)
    return FeatureReport(
        colors=ColorDistribution(**c),
        texture=TextureMetrics(edge_density=edge_density, uniformity=1.0 - edge_density),
        health=HealthMetrics(*health),
        indicators=DiseaseIndicators(**flags),
    )


class TestJitter:
    def test_no_seed_means_no_jitter(self):
        assert jitter(None) == 0.0

    def test_string_hash_matches_rolling_hash(self):
        assert seed_hash("") == 0
        assert seed_hash("a") == 97
        assert seed_hash("ab") == 97 * 31 + 98

    def test_string_hash_wraps_to_signed_32_bit(self):
        h = seed_hash("IMG_20240512_093311_leaf_sample.jpeg")
        assert -(2**31) <= h < 2**31

    def test_known_values(self):
        assert jitter("a") == pytest.approx(0.097)
        assert jitter("ab") == pytest.approx(0.005)
        assert jitter(1234) == pytest.approx(0.034)
        assert jitter(-7) == pytest.approx(0.007)

    def test_lone_surrogate_is_hashed_as_a_code_unit(self):
        assert seed_hash("\ud800") == 0xD800
        assert 0.0 <= jitter("leaf\ud800.png") < 0.1

    def test_range(self):
        for i in range(500):
            assert 0.0 <= jitter(f"leaf_{i}.jpg") < 0.1

    def test_scale_is_overridable(self):
        assert jitter("a", RulePolicy(jitter_scale=10000.0)) == pytest.approx(0.0097)


class TestScenarios:
    def test_green_leaf_is_healthy(self):
        prediction = RuleClassifier().classify(report_for(solid_buffer(GREEN)), seed="leaf.jpg")
        assert prediction.label is Label.HEALTHY
        assert 0.85 <= prediction.confidence < 0.95

    def test_dark_leaf_is_leaf_spot(self):
        report = report_for(solid_buffer(DARK))
        assert report.colors.spotting == 1.0
        assert report.indicators.bacterial_signs
        assert RuleClassifier().classify(report).label is Label.LEAF_SPOT

    def test_white_leaf_is_powdery_mildew(self):
        prediction = RuleClassifier().classify(report_for(solid_buffer(WHITE)))
        assert prediction.label is Label.POWDERY_MILDEW
        assert prediction.confidence == pytest.approx(0.88)

    def test_brown_leaf_is_rust(self):
        assert RuleClassifier().classify(report_for(solid_buffer(BROWN))).label is Label.RUST

    def test_yellow_leaf_is_aphids(self):
        prediction = RuleClassifier().classify(report_for(solid_buffer(YELLOW)))
        assert prediction.label is Label.APHIDS
        assert prediction.confidence == pytest.approx(0.76)

    def test_striped_clean_leaf_is_caterpillars(self):
        report = report_for(buffer_from_rows([GREEN, LIGHT_GREEN] * 4))
        assert RuleClassifier().classify(report).label is Label.CATERPILLARS

    def test_striped_spotted_leaf_is_spider_mites(self):
        rows = [GREEN, LIGHT_GREEN] * 3 + [GREEN, BLACK]
        report = report_for(buffer_from_rows(rows))
        assert report.colors.spotting == pytest.approx(0.125)
        assert RuleClassifier().classify(report).label is Label.SPIDER_MITES


class TestRuleOrder:
    def test_healthy_wins_over_everything(self):
        report = make_report(
            colors={"mildew": 0.5, "spotting": 0.5},
            health=(0.8, 0.2, 0.7),
            fungal_signs=True,
            bacterial_signs=True,
        )
        assert RuleClassifier().classify(report).label is Label.HEALTHY

    def test_mildew_before_leaf_spot(self):
        report = make_report(colors={"mildew": 0.1, "spotting": 0.2}, fungal_signs=True, bacterial_signs=True)
        assert RuleClassifier().classify(report).label is Label.POWDERY_MILDEW

    def test_fungal_without_enough_mildew_falls_through(self):
        report = make_report(colors={"mildew": 0.07, "browning": 0.3}, fungal_signs=True)
        assert RuleClassifier().classify(report).label is Label.RUST

    def test_viral_signs_give_thrips_when_aphid_rule_cannot_fire(self):
        policy = RulePolicy(aphid_yellowing_min=0.9)
        report = make_report(colors={"yellowing": 0.35}, edge_density=0.35, viral_signs=True)
        prediction = RuleClassifier(policy).classify(report)
        assert prediction.label is Label.THRIPS
        assert prediction.rule == "viral"

    def test_default_prefers_disease_when_riskier(self):
        prediction = RuleClassifier().classify(make_report(health=(0.5, 0.5, 0.2)))
        assert prediction.label is Label.LEAF_SPOT
        assert prediction.confidence == pytest.approx(0.70)
        assert prediction.rule == "default_disease"

    def test_default_prefers_pest_otherwise(self):
        prediction = RuleClassifier().classify(make_report(health=(0.5, 0.1, 0.2)))
        assert prediction.label is Label.APHIDS
        assert prediction.confidence == pytest.approx(0.68)

    def test_base_confidences_are_overridable(self):
        report = make_report(health=(0.9, 0.1, 0.2))
        prediction = RuleClassifier(RulePolicy(healthy=0.5)).classify(report)
        assert prediction.confidence == pytest.approx(0.5)


def test_classifier_is_deterministic():
    report = report_for(buffer_from_rows([GREEN, YELLOW, DARK, BROWN, WHITE]))
    classifier = RuleClassifier()
    first = classifier.classify(report, seed="plot-7.png")
    for _ in range(10):
        assert RuleClassifier().classify(report, seed="plot-7.png") == first


def test_seed_only_moves_confidence():
    report = report_for(solid_buffer(GREEN))
    a = RuleClassifier().classify(report, seed="a")
    b = RuleClassifier().classify(report, seed="ab")
    assert a.label == b.label
    assert a.confidence != b.confidence
