from __future__ import annotations

import asyncio
import logging
import threading

from leafguard.core.errors import (
    AnalysisFailed,
    AnalysisTimeout,
    DecodeError,
    LowConfidenceSignal,
    RemoteError,
    ValidationError,
)
from leafguard.core.policies import FallbackPolicy
from leafguard.core.reasoning import Seed
from leafguard.core.schemas import ClassificationResult
from leafguard.services.analyzer import Analyzer, Upload
from leafguard.services.decoder_service import ImageDecoder


logger = logging.getLogger(__name__)


class FallbackOrchestrator:
    """
    Remote first, local heuristic second.

    The remote analyzer is optional. Its failures and low-confidence answers are
    never fatal; a failure of the local pipeline is, and surfaces as
    AnalysisFailed. Oversized uploads are rejected before either analyzer runs.
    """

    def __init__(
        self,
        local: Analyzer,
        remote: Analyzer | None = None,
        decoder: ImageDecoder | None = None,
        policy: FallbackPolicy | None = None,
        request_timeout: float | None = 30.0,
    ):
        self.local = local
        self.remote = remote
        self.decoder = decoder or ImageDecoder()
        self.policy = policy or FallbackPolicy()
        self.request_timeout = request_timeout

    def _try_remote(
        self,
        upload: Upload,
        seed: Seed,
        cancel: threading.Event | None,
    ) -> ClassificationResult | None:
        if self.remote is None:
            return None
        try:
            result = self.remote.analyze(upload, seed=seed, cancel=cancel)
            threshold = self.policy.min_remote_confidence
            if result.confidence <= threshold:
                raise LowConfidenceSignal(result.confidence, threshold)
            return result
        except RemoteError as e:
            logger.warning("%s analysis unavailable, falling back to %s: %s", self.remote.name, self.local.name, e)
        except LowConfidenceSignal as e:
            logger.info("%s analysis discarded, falling back to %s: %s", self.remote.name, self.local.name, e)
        return None

    def classify(
        self,
        upload: Upload,
        seed: Seed = None,
        cancel: threading.Event | None = None,
    ) -> ClassificationResult:
        self.decoder.validate(upload.data, upload.declared_size)

        result = self._try_remote(upload, seed, cancel)
        if result is not None:
            logger.info(
                "Classified %s via %s: %s (%.2f)",
                upload.filename, self.remote.name, result.label.value, result.confidence,
            )
            return result

        try:
            result = self.local.analyze(upload, seed=seed, cancel=cancel)
        except (DecodeError, ValidationError) as e:
            raise AnalysisFailed(f"Image analysis failed: {e}") from e

        logger.info(
            "Classified %s via %s: %s (%.2f)",
            upload.filename, self.local.name, result.label.value, result.confidence,
        )
        return result

    async def classify_async(
        self,
        upload: Upload,
        seed: Seed = None,
        timeout: float | None = None,
    ) -> ClassificationResult:
        """
        Run ``classify`` in a worker thread under a deadline.

        On timeout or cancellation the per-request cancel event is set, so the
        worker stops at its next stage boundary instead of finishing unseen work.
        """
        budget = self.request_timeout if timeout is None else timeout
        cancel = threading.Event()
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.classify, upload, seed, cancel),
                timeout=budget,
            )
        except asyncio.TimeoutError as e:
            cancel.set()
            raise AnalysisTimeout(f"Image analysis timed out after {budget}s") from e
        except asyncio.CancelledError:
            cancel.set()
            raise
