from __future__ import annotations

import numpy as np

from leafguard.core.policies import ColorBinPolicy, TexturePolicy
from leafguard.core.schemas import ColorDistribution, ImageBuffer, TextureMetrics


def _channels(buffer: ImageBuffer) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    # int32 so channel sums and differences cannot wrap around
    rgb = buffer.pixels[..., :3].astype(np.int32)
    return rgb[..., 0], rgb[..., 1], rgb[..., 2]


def analyze_color_distribution(buffer: ImageBuffer, policy: ColorBinPolicy | None = None) -> ColorDistribution:
    """
    Put each pixel into at most one color bin and return per-bin fractions.

    Bins are tried in a fixed order (healthy, yellowing, browning, spotting,
    mildew) and a pixel lands in the first one it matches. Pixels that match
    nothing count towards the total only, so the fractions sum to <= 1.
    """
    p = policy or ColorBinPolicy()
    total = buffer.pixel_count
    if total == 0:
        return ColorDistribution(healthy=0.0, yellowing=0.0, browning=0.0, spotting=0.0, mildew=0.0)

    r, g, b = _channels(buffer)
    unassigned = np.ones(r.shape, dtype=bool)

    rules = (
        ("healthy", (g > r) & (g > b) & (g > p.healthy_green_min)),
        ("yellowing", (r > p.yellow_red_min) & (g > p.yellow_green_min) & (b < p.yellow_blue_max)),
        ("browning", (r > p.brown_red_min) & (g < p.brown_green_max) & (b < p.brown_blue_max)),
        ("spotting", (r < p.spot_channel_max) & (g < p.spot_channel_max) & (b < p.spot_channel_max)),
        ("mildew", (r > p.mildew_red_min) & (g > p.mildew_green_min) & (b > p.mildew_blue_min)),
    )

    fractions: dict[str, float] = {}
    for name, mask in rules:
        hit = mask & unassigned
        fractions[name] = float(np.count_nonzero(hit)) / total
        unassigned &= ~hit

    return ColorDistribution(**fractions)


def analyze_texture(buffer: ImageBuffer, policy: TexturePolicy | None = None) -> TextureMetrics:
    """Edge density from vertical neighbours: |sum(RGB) - sum(RGB of pixel below)| > threshold."""
    p = policy or TexturePolicy()
    sampled = max(buffer.height - 1, 0) * buffer.width
    if sampled == 0:
        return TextureMetrics(edge_density=0.0, uniformity=1.0)

    r, g, b = _channels(buffer)
    intensity = r + g + b
    diff = np.abs(intensity[1:, :] - intensity[:-1, :])
    edges = int(np.count_nonzero(diff > p.edge_threshold))

    edge_density = edges / sampled
    return TextureMetrics(edge_density=edge_density, uniformity=1.0 - edge_density)
