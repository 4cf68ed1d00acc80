from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    # Remote inference (empty URL disables the remote analyzer)
    remote_url: str = os.getenv("LEAFGUARD_REMOTE_URL", "http://127.0.0.1:8002/api/disease/analyze")
    remote_timeout_s: float = float(os.getenv("LEAFGUARD_REMOTE_TIMEOUT_S", "10"))

    # Whole-request budget for the async entry point
    request_timeout_s: float = float(os.getenv("LEAFGUARD_REQUEST_TIMEOUT_S", "30"))

    # Uploads
    max_upload_bytes: int = int(os.getenv("LEAFGUARD_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
