from __future__ import annotations

import logging
from typing import Any

from leafguard.config import Settings, settings as default_settings
from leafguard.core.orchestrator import FallbackOrchestrator
from leafguard.core.pipeline import AnalysisPipeline
from leafguard.core.policies import Policies, UploadPolicy
from leafguard.core.reasoning import Seed
from leafguard.core.response import ResponseBuilder
from leafguard.services.analyzer import Analyzer, Upload
from leafguard.services.decoder_service import ImageDecoder
from leafguard.services.local_service import LocalHeuristicAnalyzer
from leafguard.services.remote_service import RemoteAPIAnalyzer

logger = logging.getLogger(__name__)


class LeafGuardAgent:
    def __init__(
        self,
        settings: Settings | None = None,
        policies: Policies | None = None,
        remote: Analyzer | None = None,
    ):
        self.settings = settings or default_settings
        policies = policies or Policies(upload=UploadPolicy(max_bytes=self.settings.max_upload_bytes))

        self.response_builder = ResponseBuilder()
        decoder = ImageDecoder(policies.upload)
        pipeline = AnalysisPipeline(
            policies=policies,
            decoder=decoder,
            response_builder=self.response_builder,
        )

        if remote is None and self.settings.remote_url:
            remote = RemoteAPIAnalyzer(
                url=self.settings.remote_url,
                timeout=self.settings.remote_timeout_s,
                response_builder=self.response_builder,
            )

        self.orchestrator = FallbackOrchestrator(
            local=LocalHeuristicAnalyzer(pipeline),
            remote=remote,
            decoder=decoder,
            policy=policies.fallback,
            request_timeout=self.settings.request_timeout_s,
        )

        logger.info("✅ LeafGuardAgent initialized (remote=%s)", getattr(remote, "url", None) or "disabled")

    def analyze(self, upload: Upload, seed: Seed = None) -> dict[str, Any]:
        result = self.orchestrator.classify(upload, seed=seed)
        return self.response_builder.to_dict(result)

    async def analyze_async(self, upload: Upload, seed: Seed = None) -> dict[str, Any]:
        result = await self.orchestrator.classify_async(upload, seed=seed)
        return self.response_builder.to_dict(result)


if __name__ == "__main__":
    import json
    import sys
    from pathlib import Path

    logging.basicConfig(level=logging.DEBUG)

    if len(sys.argv) < 2:
        sys.exit("usage: python -m leafguard.leafguard_agent IMAGE [SEED]")

    path = Path(sys.argv[1])
    agent = LeafGuardAgent()
    out = agent.analyze(
        Upload(data=path.read_bytes(), filename=path.name, declared_size=path.stat().st_size),
        seed=sys.argv[2] if len(sys.argv) > 2 else path.name,
    )
    print(json.dumps(out, indent=2))
