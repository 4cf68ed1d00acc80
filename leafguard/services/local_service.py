from __future__ import annotations

import threading

from leafguard.core.pipeline import AnalysisPipeline
from leafguard.core.reasoning import Seed
from leafguard.core.schemas import ClassificationResult
from leafguard.services.analyzer import Analyzer, Upload


class LocalHeuristicAnalyzer(Analyzer):
    name = "local-heuristic"

    def __init__(self, pipeline: AnalysisPipeline):
        self.pipeline = pipeline

    def analyze(
        self,
        upload: Upload,
        seed: Seed = None,
        cancel: threading.Event | None = None,
    ) -> ClassificationResult:
        return self.pipeline.run(
            data=upload.data,
            declared_size=upload.declared_size,
            seed=seed,
            cancel=cancel,
        )
