from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from leafguard.core.errors import AnalysisCancelled
from leafguard.core.reasoning import Seed
from leafguard.core.schemas import ClassificationResult


@dataclass(frozen=True)
class Upload:
    data: bytes
    filename: str = "upload.jpg"
    content_type: str = "application/octet-stream"
    declared_size: int | None = None


def check_cancelled(cancel: threading.Event | None, stage: str) -> None:
    if cancel is not None and cancel.is_set():
        raise AnalysisCancelled(f"Cancelled before {stage}")


class Analyzer(ABC):
    """One way of turning an upload into a ClassificationResult."""

    name: str = "analyzer"

    @abstractmethod
    def analyze(
        self,
        upload: Upload,
        seed: Seed = None,
        cancel: threading.Event | None = None,
    ) -> ClassificationResult:
        raise NotImplementedError
