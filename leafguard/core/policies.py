from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadPolicy:
    max_bytes: int = 10 * 1024 * 1024
    # decoded size; keeps a small, highly compressible file from exhausting memory
    max_pixels: int = 40_000_000


@dataclass(frozen=True)
class ColorBinPolicy:
    # healthy: green dominant and above this level
    healthy_green_min: int = 100
    # yellowing
    yellow_red_min: int = 150
    yellow_green_min: int = 150
    yellow_blue_max: int = 100
    # browning
    brown_red_min: int = 100
    brown_green_max: int = 80
    brown_blue_max: int = 60
    # spotting: every channel below
    spot_channel_max: int = 60
    # mildew
    mildew_red_min: int = 200
    mildew_green_min: int = 200
    mildew_blue_min: int = 180


@dataclass(frozen=True)
class TexturePolicy:
    # on the 0..765 R+G+B scale
    edge_threshold: int = 30


@dataclass(frozen=True)
class HealthPolicy:
    healthy_weight: float = 0.6
    uniformity_weight: float = 0.4
    discoloration_weight: float = 0.8
    roughness_weight: float = 0.2
    pest_edge_density: float = 0.3
    pest_risk_high: float = 0.7
    pest_risk_low: float = 0.2


@dataclass(frozen=True)
class IndicatorPolicy:
    fungal_mildew: float = 0.05
    fungal_browning: float = 0.2
    bacterial_spotting: float = 0.15
    viral_yellowing: float = 0.3
    viral_uniformity: float = 0.7
    pest_edge_density: float = 0.4
    nutritional_yellowing: float = 0.4
    nutritional_spotting: float = 0.1


@dataclass(frozen=True)
class RulePolicy:
    healthy_overall_min: float = 0.7
    healthy_risk_max: float = 0.3
    mildew_min: float = 0.08
    spotting_min: float = 0.15
    rust_browning_min: float = 0.25
    pest_edge_density: float = 0.4
    caterpillar_spotting_max: float = 0.1
    aphid_yellowing_min: float = 0.3

    # base confidences, before jitter
    healthy: float = 0.85
    powdery_mildew: float = 0.88
    leaf_spot: float = 0.82
    rust: float = 0.79
    caterpillars: float = 0.84
    spider_mites: float = 0.81
    aphids: float = 0.76
    thrips: float = 0.73
    default_leaf_spot: float = 0.70
    default_aphids: float = 0.68

    # jitter lands in [0, jitter_buckets / jitter_scale)
    jitter_buckets: int = 100
    jitter_scale: float = 1000.0


@dataclass(frozen=True)
class FallbackPolicy:
    # remote results at or below this are discarded
    min_remote_confidence: float = 0.6


@dataclass(frozen=True)
class Policies:
    upload: UploadPolicy = field(default_factory=UploadPolicy)
    colors: ColorBinPolicy = field(default_factory=ColorBinPolicy)
    texture: TexturePolicy = field(default_factory=TexturePolicy)
    health: HealthPolicy = field(default_factory=HealthPolicy)
    indicators: IndicatorPolicy = field(default_factory=IndicatorPolicy)
    rules: RulePolicy = field(default_factory=RulePolicy)
    fallback: FallbackPolicy = field(default_factory=FallbackPolicy)
