"""Original gravity (OG) resolution for a hydrometer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from fermwatch.core.exceptions import RaptAPIError
from fermwatch.models.enums import OriginalGravitySource
from fermwatch.schemas.device import Device, ProfileSession
from fermwatch.schemas.telemetry import RawSample

logger = logging.getLogger(__name__)

ProfileSessionLookup = Callable[[str], Awaitable[ProfileSession | None]]


@dataclass(frozen=True)
class ResolvedGravity:
    value: float
    source: OriginalGravitySource


def earliest_sample(samples: Sequence[RawSample]) -> RawSample:
    # sorted() is stable, so ties keep input order and the first one wins
    return sorted(samples, key=lambda s: s.created_on)[0]


async def resolve_original_gravity(
    device: Device,
    telemetry: Sequence[RawSample],
    profile_session_lookup: ProfileSessionLookup,
    manual_og: float | None = None,
) -> ResolvedGravity | None:
    """Pick the OG baseline for ``device``, first match wins.

    1. ``originalGravity`` of the device's active profile session
    2. the manually configured OG
    3. gravity of the chronologically earliest reading

    Returns None when there is no telemetry; no value is made up.
    """
    if not telemetry:
        return None

    session_ref = device.active_profile_session
    if session_ref is not None and session_ref.id:
        try:
            session = await profile_session_lookup(session_ref.id)
        except RaptAPIError as exc:
            logger.warning("Profile session lookup failed for %s: %s", device.id, exc)
            session = None
        if session is not None and session.original_gravity:
            logger.info("Device %s: OG %s from profile session", device.id, session.original_gravity)
            return ResolvedGravity(session.original_gravity, OriginalGravitySource.PROFILE_SESSION)

    if manual_og:
        logger.info("Device %s: OG %s from manual configuration", device.id, manual_og)
        return ResolvedGravity(manual_og, OriginalGravitySource.MANUAL)

    og = earliest_sample(telemetry).gravity
    logger.info("Device %s: OG %s from first reading", device.id, og)
    return ResolvedGravity(og, OriginalGravitySource.FIRST_READING)
