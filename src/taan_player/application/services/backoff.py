"""Retry-After parsing and the attempt budget used by the auth coordinator."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from ...domain.shared.constants import HttpHeaders

logger = logging.getLogger(__name__)


def parse_retry_after(headers: Mapping[str, str] | None, cap: float | None = None) -> float:
    """Seconds to wait before retrying a rate-limited request.

    A missing or unparseable header means retry immediately. Negative values
    are clamped to zero. ``cap`` bounds a single wait when set.
    """
    if not headers:
        return 0.0

    raw = None
    for key, value in headers.items():
        if key.lower() == HttpHeaders.RETRY_AFTER.lower():
            raw = value
            break
    if raw is None:
        return 0.0

    try:
        seconds = float(str(raw).strip())
    except ValueError:
        logger.debug("Unparseable Retry-After header: %r", raw)
        return 0.0

    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    if cap is not None:
        seconds = min(seconds, cap)
    return seconds


@dataclass
class AttemptBudget:
    """Counts attempts against an optional upper bound.

    ``max_attempts=None`` never runs out.
    """

    max_attempts: int | None
    used: int = 0

    def consume(self) -> int:
        self.used += 1
        return self.used

    @property
    def exhausted(self) -> bool:
        return self.max_attempts is not None and self.used >= self.max_attempts
