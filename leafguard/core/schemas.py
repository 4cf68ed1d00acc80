from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np


class Label(str, Enum):
    APHIDS = "aphids"
    POWDERY_MILDEW = "powdery_mildew"
    LEAF_SPOT = "leaf_spot"
    SPIDER_MITES = "spider_mites"
    CATERPILLARS = "caterpillars"
    RUST = "rust"
    LATE_BLIGHT = "late_blight"
    THRIPS = "thrips"
    HEALTHY = "healthy"


class Severity(str, Enum):
    NONE = "None"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class IssueType(str, Enum):
    DISEASE = "disease"
    PEST = "pest"
    HEALTHY = "healthy"


class Source(str, Enum):
    REMOTE = "remote"
    LOCAL_HEURISTIC = "local-heuristic"


@dataclass(frozen=True, eq=False)
class ImageBuffer:
    """Decoded image: ``pixels`` is a read-only (height, width, 4) uint8 RGBA array."""

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixel array shape {self.pixels.shape} does not match {self.height}x{self.width} RGBA"
            )
        self.pixels.setflags(write=False)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class ColorDistribution:
    healthy: float
    yellowing: float
    browning: float
    spotting: float
    mildew: float


@dataclass(frozen=True)
class TextureMetrics:
    edge_density: float
    uniformity: float


@dataclass(frozen=True)
class HealthMetrics:
    overall_health: float
    disease_risk: float
    pest_risk: float


@dataclass(frozen=True)
class DiseaseIndicators:
    fungal_signs: bool
    bacterial_signs: bool
    viral_signs: bool
    pest_damage: bool
    nutritional_deficiency: bool


@dataclass(frozen=True)
class FeatureReport:
    colors: ColorDistribution
    texture: TextureMetrics
    health: HealthMetrics
    indicators: DiseaseIndicators


@dataclass(frozen=True)
class Prediction:
    label: Label
    confidence: float
    rule: str  # which decision rule fired, e.g. "healthy", "pest_damage"


@dataclass(frozen=True)
class Alternative:
    name: str
    confidence: float


@dataclass(frozen=True)
class ClassificationResult:
    label: Label
    name: str
    description: str
    confidence: float
    severity: Severity
    type: IssueType
    symptoms: list[str]
    control_measures: list[str]
    alternatives: list[Alternative]
    source: Source
    details: dict[str, Any] = field(default_factory=dict)
