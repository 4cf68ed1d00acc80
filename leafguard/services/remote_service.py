from __future__ import annotations

import logging
import math
import threading
from typing import Any

import requests

from leafguard.core.errors import RemoteError
from leafguard.core.knowledge import map_to_label
from leafguard.core.reasoning import Seed
from leafguard.core.response import ResponseBuilder
from leafguard.core.schemas import Alternative, ClassificationResult, Source
from leafguard.services.analyzer import Analyzer, Upload, check_cancelled


logger = logging.getLogger(__name__)


def _parse_alternatives(raw: Any) -> list[Alternative]:
    if not isinstance(raw, list):
        return []
    parsed: list[Alternative] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        try:
            confidence = float(item.get("confidence"))
        except (TypeError, ValueError):
            continue
        if not math.isfinite(confidence):
            continue
        parsed.append(Alternative(name=str(item["name"]), confidence=confidence))
    return parsed


class RemoteAPIAnalyzer(Analyzer):
    """
    Multipart upload to the remote disease-detection endpoint.

    One attempt per call, bounded by ``timeout``. Every failure mode (transport,
    timeout, HTTP status, unusable JSON) is raised as RemoteError.
    """

    name = "remote"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        response_builder: ResponseBuilder | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.response_builder = response_builder or ResponseBuilder()

    def _post(self, upload: Upload) -> dict[str, Any]:
        try:
            response = self.session.post(
                self.url,
                files={"file": (upload.filename, upload.data, upload.content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise RemoteError(f"Remote analysis request failed: {e}") from e
        except ValueError as e:
            raise RemoteError(f"Remote analysis returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RemoteError("Remote analysis returned a non-object payload")
        return data

    def analyze(
        self,
        upload: Upload,
        seed: Seed = None,
        cancel: threading.Event | None = None,
    ) -> ClassificationResult:
        check_cancelled(cancel, "remote call")
        data = self._post(upload)
        check_cancelled(cancel, "remote normalization")

        try:
            confidence = float(data["confidence"])
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteError("Remote analysis response has no usable confidence") from e
        if not math.isfinite(confidence):
            raise RemoteError(f"Remote analysis returned a non-finite confidence: {confidence}")

        label = map_to_label(data.get("disease") or data.get("name"))
        logger.debug("Remote answered %r → %s (%.2f)", data.get("disease"), label.value, confidence)

        details: dict[str, Any] = {"remote_confidence": confidence}
        if data.get("source"):
            details["source"] = data["source"]
        if data.get("analysis_details") is not None:
            details["analysis_details"] = data["analysis_details"]

        return self.response_builder.build(
            label=label,
            confidence=confidence,
            source=Source.REMOTE,
            details=details,
            alternatives=_parse_alternatives(data.get("alternatives")),
        )
