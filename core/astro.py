"""Sunrise and sunset search around a query instant."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .ephemeris import horizontal_coordinates, sun_position
from .timescale import julian_date, local_sidereal_time

__all__ = [
    "SR_WINDOW",
    "TWILIGHT_ANGLES",
    "SearchWindowError",
    "SunRiseResult",
    "calculate",
]

LOGGER = logging.getLogger(__name__)

# Search window in hours, centred on the query instant. Even integers only.
SR_WINDOW = 48

TWILIGHT_ANGLES: Dict[str, float] = {
    "official": -0.833,
    "civil": -6.0,
    "nautical": -12.0,
    "astronomical": -18.0,
}

SECONDS_PER_HOUR = 3600
_LINEAR_EPSILON = 1e-12


class SearchWindowError(ValueError):
    """Raised when the search window is not a positive even number of hours."""


@dataclass(frozen=True)
class SunRiseResult:
    """Nearest sun rise/set events around ``query_time``.

    Times are UTC seconds from the Unix epoch and azimuths are degrees from
    north. ``rise_time``/``rise_az`` are only meaningful when ``has_rise`` is
    set, likewise for the set fields; otherwise they stay zero.
    """

    query_time: int
    rise_time: int = 0
    set_time: int = 0
    rise_az: float = 0.0
    set_az: float = 0.0
    has_rise: bool = False
    has_set: bool = False
    is_visible: bool = False


@dataclass(frozen=True)
class _Crossing:
    time: int
    azimuth: float
    rising: bool


@dataclass
class _EventLedger:
    """Nearest crossing per kind on each side of the query instant."""

    query_time: int
    slots: Dict[Tuple[bool, bool], _Crossing] = field(default_factory=dict)

    def _distance(self, crossing: _Crossing) -> int:
        return abs(crossing.time - self.query_time)

    def record(self, crossing: _Crossing) -> None:
        key = (crossing.rising, crossing.time <= self.query_time)
        current = self.slots.get(key)
        if current is None or self._distance(crossing) < self._distance(current):
            self.slots[key] = crossing

    def resolve(self, rising: bool) -> Optional[_Crossing]:
        """Pick the single reported crossing of one kind.

        The latest crossing at or before the query and the first one after it
        claim the slot of their own kind. A kind claimed by neither falls back
        to its candidate nearest the query.
        """

        before = [c for (_, is_before), c in self.slots.items() if is_before]
        after = [c for (_, is_before), c in self.slots.items() if not is_before]
        anchors = []
        if before:
            anchors.append(max(before, key=lambda c: c.time))
        if after:
            anchors.append(min(after, key=lambda c: c.time))
        for anchor in anchors:
            if anchor.rising == rising:
                return anchor

        candidates = [c for (kind, _), c in self.slots.items() if kind == rising]
        if not candidates:
            return None
        return min(candidates, key=self._distance)


def _check_window(window_hours: int) -> None:
    if (
        isinstance(window_hours, bool)
        or not isinstance(window_hours, (int, np.integer))
        or window_hours <= 0
        or window_hours % 2
    ):
        raise SearchWindowError(
            f"Search window must be a positive even number of hours: {window_hours!r}"
        )


def _horizon_altitude(twilight: str) -> float:
    try:
        return TWILIGHT_ANGLES[twilight]
    except KeyError as exc:
        raise ValueError(f"Unsupported twilight selector: {twilight}") from exc


def _interpolate_crossings(f0: float, f1: float, f2: float) -> List[Tuple[float, bool]]:
    """Zero crossings of the quadratic through ``(0, f0)``, ``(0.5, f1)``, ``(1, f2)``.

    Returns ``(fraction, rising)`` pairs for roots in ``[0, 1)``, in order.
    """

    a = 2.0 * f2 - 4.0 * f1 + 2.0 * f0
    b = 4.0 * f1 - 3.0 * f0 - f2
    c = f0

    if abs(a) < _LINEAR_EPSILON:
        if b == 0.0:
            return []
        roots = [-c / b]
    else:
        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return []
        root = math.sqrt(discriminant)
        roots = sorted({(-b - root) / (2.0 * a), (-b + root) / (2.0 * a)})

    crossings = []
    for fraction in roots:
        if not 0.0 <= fraction < 1.0:
            continue
        slope = 2.0 * a * fraction + b
        if slope == 0.0:
            continue  # tangent, the sun only grazes the horizon
        crossings.append((fraction, slope > 0.0))
    return crossings


def _test_horizon_crossing(
    ledger: _EventLedger,
    hour_index: int,
    window_start: int,
    samples: np.ndarray,
    latitude: float,
    longitude: float,
) -> None:
    """Look for rise or set events during hour ``hour_index`` of the window."""

    f0, f1, f2 = (float(value) for value in samples)
    for fraction, rising in _interpolate_crossings(f0, f1, f2):
        event_time = window_start + int(round((hour_index + fraction) * SECONDS_PER_HOUR))
        _, azimuth = horizontal_coordinates(julian_date(event_time), latitude, longitude)
        crossing = _Crossing(time=event_time, azimuth=azimuth, rising=rising)
        LOGGER.debug(
            json.dumps(
                {
                    "event": "horizon_crossing",
                    "kind": "rise" if rising else "set",
                    "time": event_time,
                    "azimuth": round(azimuth, 3),
                    "hour": hour_index,
                }
            )
        )
        ledger.record(crossing)


def _altitude_samples(
    offsets: np.ndarray, latitude: float, longitude: float, horizon: float
) -> np.ndarray:
    """sin(altitude) - sin(horizon) at each day offset."""

    positions = sun_position(offsets)
    hour_angle = np.radians(
        local_sidereal_time(offsets, longitude) - 15.0 * positions.right_ascension
    )
    lat = math.radians(latitude)
    dec = np.radians(positions.declination)
    sin_altitude = math.sin(lat) * np.sin(dec) + math.cos(lat) * np.cos(dec) * np.cos(
        hour_angle
    )
    return sin_altitude - math.sin(math.radians(horizon))


def calculate(
    latitude: float,
    longitude: float,
    query_time: int,
    *,
    twilight: str = "official",
    window_hours: int = SR_WINDOW,
) -> SunRiseResult:
    """Find the sun rise and set events nearest to ``query_time``.

    Parameters
    ----------
    latitude:
        Degrees, -90 (south pole) to 90 (north pole). Values outside that
        range are clipped.
    longitude:
        Degrees, east positive.
    query_time:
        UTC seconds from the Unix epoch. Events up to ``window_hours / 2``
        hours before and after this instant are searched.
    twilight:
        Key of :data:`TWILIGHT_ANGLES` selecting the horizon altitude.
    window_hours:
        Total search window, a positive even number of hours.

    Returns
    -------
    SunRiseResult
        In polar regions there may be no event inside the window; the flags
        then stay false and the event fields stay zero.

    Raises
    ------
    SearchWindowError
        If ``window_hours`` is not a positive even integer.
    ValueError
        If ``twilight`` is unknown.
    """

    _check_window(window_hours)
    horizon = _horizon_altitude(twilight)
    latitude = float(np.clip(latitude, -90.0, 90.0))
    query_time = int(query_time)

    window_start = query_time - (window_hours // 2) * SECONDS_PER_HOUR
    # Half-hour samples: hour k spans samples 2k, 2k + 1 and 2k + 2.
    instants = window_start + np.arange(2 * window_hours + 1) * (SECONDS_PER_HOUR // 2)
    samples = _altitude_samples(julian_date(instants), latitude, longitude, horizon)

    ledger = _EventLedger(query_time=query_time)
    for hour_index in range(window_hours):
        _test_horizon_crossing(
            ledger,
            hour_index,
            window_start,
            samples[2 * hour_index : 2 * hour_index + 3],
            latitude,
            longitude,
        )

    altitude, _ = horizontal_coordinates(julian_date(query_time), latitude, longitude)
    rise = ledger.resolve(rising=True)
    sunset = ledger.resolve(rising=False)

    result = SunRiseResult(
        query_time=query_time,
        rise_time=rise.time if rise else 0,
        set_time=sunset.time if sunset else 0,
        rise_az=rise.azimuth if rise else 0.0,
        set_az=sunset.azimuth if sunset else 0.0,
        has_rise=rise is not None,
        has_set=sunset is not None,
        is_visible=altitude > horizon,
    )
    LOGGER.debug(
        json.dumps(
            {
                "event": "sun_calculated",
                "lat": latitude,
                "lon": longitude,
                "query_time": query_time,
                "window_hours": window_hours,
                "has_rise": result.has_rise,
                "has_set": result.has_set,
                "is_visible": result.is_visible,
            }
        )
    )
    return result
