from __future__ import annotations

import logging
import threading

from leafguard.core.features import analyze_color_distribution, analyze_texture
from leafguard.core.metrics import compute_health_metrics, detect_indicators
from leafguard.core.policies import Policies
from leafguard.core.reasoning import RuleClassifier, Seed
from leafguard.core.response import ResponseBuilder
from leafguard.core.schemas import ClassificationResult, FeatureReport, ImageBuffer, Source
from leafguard.services.analyzer import check_cancelled
from leafguard.services.decoder_service import ImageDecoder


logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """decode → features → metrics/indicators → rules → knowledge-base merge."""

    def __init__(
        self,
        policies: Policies | None = None,
        decoder: ImageDecoder | None = None,
        classifier: RuleClassifier | None = None,
        response_builder: ResponseBuilder | None = None,
    ):
        self.policies = policies or Policies()
        self.decoder = decoder or ImageDecoder(self.policies.upload)
        self.classifier = classifier or RuleClassifier(self.policies.rules)
        self.response_builder = response_builder or ResponseBuilder()

    def extract(self, buffer: ImageBuffer) -> FeatureReport:
        colors = analyze_color_distribution(buffer, self.policies.colors)
        texture = analyze_texture(buffer, self.policies.texture)
        return FeatureReport(
            colors=colors,
            texture=texture,
            health=compute_health_metrics(colors, texture, self.policies.health),
            indicators=detect_indicators(colors, texture, self.policies.indicators),
        )

    def run(
        self,
        data: bytes,
        declared_size: int | None = None,
        seed: Seed = None,
        cancel: threading.Event | None = None,
    ) -> ClassificationResult:
        check_cancelled(cancel, "decode")
        buffer = self.decoder.decode(data, declared_size=declared_size)

        check_cancelled(cancel, "feature extraction")
        report = self.extract(buffer)

        check_cancelled(cancel, "classification")
        prediction = self.classifier.classify(report, seed=seed)

        logger.debug("Local features: %s", self.response_builder.summarize(report))

        return self.response_builder.build(
            label=prediction.label,
            confidence=prediction.confidence,
            source=Source.LOCAL_HEURISTIC,
            details=self.response_builder.feature_details(report, prediction.rule),
        )
