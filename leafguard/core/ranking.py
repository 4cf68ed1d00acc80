from __future__ import annotations

from leafguard.core.knowledge import KnowledgeEntry
from leafguard.core.schemas import Alternative


def rank_alternatives(entry: KnowledgeEntry, primary_confidence: float) -> list[Alternative]:
    """
    Secondary candidates for ``entry``: primary confidence minus each fixed offset,
    floored at zero. Anything not strictly below the primary is dropped.
    """
    ranked: list[Alternative] = []
    for option in entry.alternatives:
        confidence = max(0.0, primary_confidence - option.offset)
        if confidence < primary_confidence:
            ranked.append(Alternative(name=option.name, confidence=confidence))
    ranked.sort(key=lambda a: a.confidence, reverse=True)
    return ranked
