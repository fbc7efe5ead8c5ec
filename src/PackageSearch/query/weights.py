"""Ranking weight normalization.

Rescales the quality/popularity/maintenance weights into a convex
combination while keeping their relative proportions, so that
``normalize(w) == normalize(k * w)`` for any ``k > 0``.
"""

from __future__ import annotations

import math
from typing import Final

from PackageSearch.core.errors import InvalidParameter
from PackageSearch.core.query import NormalizedWeights, Weights

# ~0.27 / ~0.45 / ~0.28 once normalized
DEFAULT_WEIGHTS: Final = Weights(quality=1.95, popularity=3.3, maintenance=2.05)

ZERO_WEIGHTS_FALLBACK: Final = "fallback"
ZERO_WEIGHTS_REJECT: Final = "reject"
ZERO_WEIGHTS_POLICIES: Final[frozenset[str]] = frozenset({ZERO_WEIGHTS_FALLBACK, ZERO_WEIGHTS_REJECT})


def normalize(
    weights: Weights,
    *,
    fallback: Weights = DEFAULT_WEIGHTS,
    zero_weights: str = ZERO_WEIGHTS_FALLBACK,
) -> NormalizedWeights:
    """Normalize ranking weights so that they sum to 1.

    Args:
        weights: Raw, non-negative weights.
        fallback: Distribution used when every weight is zero.
        zero_weights: ``"fallback"`` substitutes ``fallback`` when all weights
            are zero; ``"reject"`` raises instead.

    Returns:
        Normalized weights, each in ``[0, 1]``.

    Raises:
        InvalidParameter: If a weight is negative or not finite, or all
            weights are zero under the ``reject`` policy.
        ValueError: If ``zero_weights`` is unknown or ``fallback`` sums to zero.
    """
    if zero_weights not in ZERO_WEIGHTS_POLICIES:
        raise ValueError(f"Unsupported zero-weights policy: {zero_weights}")

    values = (weights.quality, weights.popularity, weights.maintenance)
    for name, value in zip(("quality-weight", "popularity-weight", "maintenance-weight"), values):
        if not math.isfinite(value) or value < 0:
            raise InvalidParameter(f"{name} must be a finite, non-negative number", param=name)

    total = math.fsum(values)
    if total > 0:
        return NormalizedWeights(
            quality=weights.quality / total,
            popularity=weights.popularity / total,
            maintenance=weights.maintenance / total,
        )

    if zero_weights == ZERO_WEIGHTS_REJECT:
        raise InvalidParameter("At least one ranking weight must be positive", param="weights")

    fallback_total = math.fsum((fallback.quality, fallback.popularity, fallback.maintenance))
    if not fallback_total > 0:
        raise ValueError("Fallback weights must sum to a positive number")
    return NormalizedWeights(
        quality=fallback.quality / fallback_total,
        popularity=fallback.popularity / fallback_total,
        maintenance=fallback.maintenance / fallback_total,
    )
