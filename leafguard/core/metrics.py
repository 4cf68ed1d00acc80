from __future__ import annotations

from leafguard.core.policies import HealthPolicy, IndicatorPolicy
from leafguard.core.schemas import ColorDistribution, DiseaseIndicators, HealthMetrics, TextureMetrics


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def compute_health_metrics(
    colors: ColorDistribution,
    texture: TextureMetrics,
    policy: HealthPolicy | None = None,
) -> HealthMetrics:
    p = policy or HealthPolicy()

    overall_health = p.healthy_weight * colors.healthy + p.uniformity_weight * texture.uniformity
    discoloration = colors.yellowing + colors.browning + colors.spotting
    disease_risk = p.discoloration_weight * discoloration + p.roughness_weight * (1.0 - texture.uniformity)
    pest_risk = p.pest_risk_high if texture.edge_density > p.pest_edge_density else p.pest_risk_low

    return HealthMetrics(
        overall_health=_clamp(overall_health),
        disease_risk=_clamp(disease_risk),
        pest_risk=_clamp(pest_risk),
    )


def detect_indicators(
    colors: ColorDistribution,
    texture: TextureMetrics,
    policy: IndicatorPolicy | None = None,
) -> DiseaseIndicators:
    p = policy or IndicatorPolicy()
    return DiseaseIndicators(
        fungal_signs=colors.mildew > p.fungal_mildew or colors.browning > p.fungal_browning,
        bacterial_signs=colors.spotting > p.bacterial_spotting,
        viral_signs=colors.yellowing > p.viral_yellowing and texture.uniformity < p.viral_uniformity,
        pest_damage=texture.edge_density > p.pest_edge_density,
        nutritional_deficiency=colors.yellowing > p.nutritional_yellowing and colors.spotting < p.nutritional_spotting,
    )
