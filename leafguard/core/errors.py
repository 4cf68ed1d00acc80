from __future__ import annotations


class LeafGuardError(Exception):
    """Base class for every error raised by the classification core."""


class ValidationError(LeafGuardError):
    """Upload rejected before decoding (too large, empty)."""


class UploadTooLarge(ValidationError):
    """Upload exceeds the size ceiling."""


class DecodeError(LeafGuardError):
    """Bytes could not be decoded into an image."""


class RemoteError(LeafGuardError):
    """Remote inference call failed (transport, timeout, HTTP status, bad JSON)."""


class LowConfidenceSignal(LeafGuardError):
    """Remote answered, but not confidently enough to be trusted."""

    def __init__(self, confidence: float, threshold: float):
        super().__init__(f"Remote confidence {confidence:.2f} <= {threshold:.2f}")
        self.confidence = confidence
        self.threshold = threshold


class AnalysisFailed(LeafGuardError):
    """Terminal failure: no analyzer could produce a result."""


class AnalysisTimeout(AnalysisFailed):
    """The whole request exceeded its time budget."""


class AnalysisCancelled(LeafGuardError):
    """The request was cancelled between pipeline stages."""
