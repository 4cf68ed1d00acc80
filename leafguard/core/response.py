from __future__ import annotations

import math
from typing import Any

from leafguard.core.knowledge import lookup
from leafguard.core.ranking import rank_alternatives
from leafguard.core.schemas import Alternative, ClassificationResult, FeatureReport, Label, Source


class ResponseBuilder:
    def build(
        self,
        label: Label,
        confidence: float,
        source: Source,
        details: dict[str, Any] | None = None,
        alternatives: list[Alternative] | None = None,
    ) -> ClassificationResult:
        """
        Merge a (label, confidence) pair with its knowledge-base entry.

        Confidence is capped by the entry's ceiling. Supplied alternatives are
        kept only if they sit strictly below the capped primary; when none
        survive, they are ranked from the knowledge base instead.
        """
        if not math.isfinite(confidence):
            raise ValueError(f"confidence must be finite, got {confidence}")
        entry = lookup(label)
        final = min(max(0.0, min(1.0, confidence)), entry.confidence_ceiling)

        alts = [a for a in (alternatives or []) if 0.0 <= a.confidence < final]
        alts.sort(key=lambda a: a.confidence, reverse=True)
        if label is Label.HEALTHY:
            alts = []
        elif not alts:
            alts = rank_alternatives(entry, final)

        return ClassificationResult(
            label=label,
            name=entry.name,
            description=entry.description,
            confidence=final,
            severity=entry.severity,
            type=entry.type,
            symptoms=list(entry.symptoms),
            control_measures=list(entry.control_measures),
            alternatives=alts,
            source=source,
            details=dict(details or {}),
        )

    def summarize(self, report: FeatureReport) -> str:
        health = report.health
        return (
            f"Health score {health.overall_health * 100:.1f}%, "
            f"Disease risk {health.disease_risk * 100:.1f}%, "
            f"Pest risk {health.pest_risk * 100:.1f}%"
        )

    def feature_details(self, report: FeatureReport, rule: str) -> dict[str, Any]:
        return {
            "rule": rule,
            "summary": self.summarize(report),
            "colors": {
                "healthy": report.colors.healthy,
                "yellowing": report.colors.yellowing,
                "browning": report.colors.browning,
                "spotting": report.colors.spotting,
                "mildew": report.colors.mildew,
            },
            "texture": {
                "edge_density": report.texture.edge_density,
                "uniformity": report.texture.uniformity,
            },
            "health": {
                "overall_health": report.health.overall_health,
                "disease_risk": report.health.disease_risk,
                "pest_risk": report.health.pest_risk,
            },
            "indicators": {
                "fungal_signs": report.indicators.fungal_signs,
                "bacterial_signs": report.indicators.bacterial_signs,
                "viral_signs": report.indicators.viral_signs,
                "pest_damage": report.indicators.pest_damage,
                "nutritional_deficiency": report.indicators.nutritional_deficiency,
            },
            "shape": {
                "spot_patterns": report.colors.spotting > 0.1,
                "leaf_integrity": report.colors.healthy > 0.6,
                "discoloration": report.colors.yellowing + report.colors.browning,
            },
        }

    def to_dict(self, result: ClassificationResult) -> dict[str, Any]:
        return {
            "disease": result.label.value,
            "name": result.name,
            "description": result.description,
            "confidence": result.confidence,
            "severity": result.severity.value,
            "type": result.type.value,
            "symptoms": list(result.symptoms),
            "control_measures": list(result.control_measures),
            "alternatives": [{"name": a.name, "confidence": a.confidence} for a in result.alternatives],
            "source": result.source.value,
            "details": result.details,
        }
