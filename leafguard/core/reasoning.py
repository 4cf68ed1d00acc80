from __future__ import annotations

import logging

from leafguard.core.policies import RulePolicy
from leafguard.core.schemas import FeatureReport, Label, Prediction


logger = logging.getLogger(__name__)

Seed = str | int | None


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def seed_hash(seed: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to signed 32 bit."""
    h = 0
    data = seed.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        unit = int.from_bytes(data[i:i + 2], "little")
        h = _to_int32((h << 5) - h + unit)
    return h


def jitter(seed: Seed, policy: RulePolicy | None = None) -> float:
    """Deterministic offset in [0, 0.1) for the given seed; 0.0 without one."""
    p = policy or RulePolicy()
    if seed is None:
        return 0.0
    h = seed if isinstance(seed, int) else seed_hash(seed)
    return (abs(h) % p.jitter_buckets) / p.jitter_scale


class RuleClassifier:
    """
    Ordered decision list over a FeatureReport.

    Rules are evaluated once, top to bottom; the first match decides the label.
    The result depends only on the report and the seed.
    """

    def __init__(self, policy: RulePolicy | None = None):
        self.policy = policy or RulePolicy()

    def classify(self, report: FeatureReport, seed: Seed = None) -> Prediction:
        p = self.policy
        j = jitter(seed, p)
        label, base, rule = self._decide(report)
        confidence = max(0.0, min(1.0, base + j))

        logger.debug("Rule %s fired → %s (base=%.2f jitter=%.3f)", rule, label.value, base, j)
        return Prediction(label=label, confidence=confidence, rule=rule)

    def _decide(self, report: FeatureReport) -> tuple[Label, float, str]:
        p = self.policy
        colors = report.colors
        health = report.health
        ind = report.indicators

        if health.overall_health > p.healthy_overall_min and health.disease_risk < p.healthy_risk_max:
            return Label.HEALTHY, p.healthy, "healthy"

        if ind.fungal_signs and colors.mildew > p.mildew_min:
            return Label.POWDERY_MILDEW, p.powdery_mildew, "mildew"

        if ind.bacterial_signs and colors.spotting > p.spotting_min:
            return Label.LEAF_SPOT, p.leaf_spot, "spotting"

        if colors.browning > p.rust_browning_min and ind.fungal_signs:
            return Label.RUST, p.rust, "browning"

        if ind.pest_damage and report.texture.edge_density > p.pest_edge_density:
            if colors.spotting < p.caterpillar_spotting_max:
                return Label.CATERPILLARS, p.caterpillars, "pest_damage"
            return Label.SPIDER_MITES, p.spider_mites, "pest_damage_spotted"

        if colors.yellowing > p.aphid_yellowing_min and not ind.pest_damage:
            return Label.APHIDS, p.aphids, "yellowing"

        if ind.viral_signs:
            return Label.THRIPS, p.thrips, "viral"

        if health.disease_risk > health.pest_risk:
            return Label.LEAF_SPOT, p.default_leaf_spot, "default_disease"
        return Label.APHIDS, p.default_aphids, "default_pest"
