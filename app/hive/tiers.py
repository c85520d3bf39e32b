from __future__ import annotations

from collections.abc import Sequence

from app.hive.errors import HiveConfigurationError
from app.hive.types import ResolvedTier, TierBreakpoint


def validate_breakpoints(breakpoints: Sequence[TierBreakpoint]) -> None:
    if not breakpoints:
        raise HiveConfigurationError("tier table is empty")
    for previous, current in zip(breakpoints, breakpoints[1:]):
        if current.min_points <= previous.min_points:
            raise HiveConfigurationError(
                "tier table must be ordered by strictly increasing min_points: "
                f"{previous.name!r} ({previous.min_points}) precedes "
                f"{current.name!r} ({current.min_points})"
            )


def resolve_tier(
    points: int,
    is_trial: bool,
    breakpoints: Sequence[TierBreakpoint],
) -> ResolvedTier:
    """Map beacon points to a tier.

    ``breakpoints`` must be ordered lowest threshold first. A member on trial
    is granted at least the lowest tier; anyone else below the first
    threshold, including zero points, gets ``ResolvedTier.none()``.
    """
    validate_breakpoints(breakpoints)

    if points == 0 and not is_trial:
        return ResolvedTier.none()

    matched: TierBreakpoint | None = None
    for candidate in breakpoints:
        if candidate.min_points > points:
            break
        matched = candidate

    if matched is None:
        if not is_trial:
            return ResolvedTier.none()
        matched = breakpoints[0]
    return ResolvedTier(tier=matched.tier, name=matched.name)
