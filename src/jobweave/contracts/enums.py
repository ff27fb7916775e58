"""Policies and kinds used across subsystem boundaries."""

from enum import StrEnum


class ProducerPolicy(StrEnum):
    """How the wirer picks a producer when several nodes output the same role.

    Only nodes registered before the consumer are candidates, so every
    policy yields edges that point forward in registration order.
    """

    FIRST = "first"
    LATEST = "latest"
    REJECT = "reject"


class ResolutionPhase(StrEnum):
    """Phases of a resolution run, used in log and event payloads."""

    VALIDATING = "validating"
    WIRING = "wiring"
    LAYERING = "layering"
