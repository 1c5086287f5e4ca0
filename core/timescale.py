"""Julian-date offsets and sidereal time for UTC epoch instants."""

from __future__ import annotations

from typing import Union

import numpy as np

__all__ = [
    "J2000_UNIX",
    "SECONDS_PER_DAY",
    "SIDEREAL_RATIO",
    "GMST_J2000",
    "julian_date",
    "unix_time",
    "local_sidereal_time",
]

J2000_UNIX = 946_728_000  # 2000-01-01T12:00:00Z in Unix seconds.
SECONDS_PER_DAY = 86_400.0
SIDEREAL_RATIO = 1.00273790935  # Sidereal days per solar day.
GMST_J2000 = 280.46061837  # Greenwich mean sidereal time at J2000.0, degrees.

ArrayLike = Union[float, np.ndarray]


def julian_date(unix_time: ArrayLike) -> ArrayLike:
    """Return days elapsed since J2000.0 (2000-01-01 12:00 UTC).

    Fractional days are preserved; ``0.0`` is the reference epoch itself.
    """

    return (unix_time - J2000_UNIX) / SECONDS_PER_DAY


def unix_time(offset_days: float) -> int:
    """Inverse of :func:`julian_date`, rounded to whole seconds."""

    return int(round(offset_days * SECONDS_PER_DAY)) + J2000_UNIX


def local_sidereal_time(offset_days: ArrayLike, longitude: float) -> ArrayLike:
    """Local mean sidereal time in degrees, normalised to ``[0, 360)``.

    Parameters
    ----------
    offset_days:
        Days since J2000.0, scalar or array.
    longitude:
        Observer longitude in degrees, east positive.
    """

    # 360 * SIDEREAL_RATIO per day is 15 degrees/hour times the sidereal ratio.
    degrees = GMST_J2000 + 360.0 * SIDEREAL_RATIO * offset_days + longitude
    lst = np.mod(degrees, 360.0)
    if np.ndim(lst) == 0:
        return float(lst)
    return lst
