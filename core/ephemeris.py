"""Low-precision solar ephemeris and horizontal coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .timescale import local_sidereal_time

__all__ = ["SkyPosition", "sun_position", "horizontal_coordinates"]

ArrayLike = Union[float, np.ndarray]

# Low-order solar model, degrees and degrees/day from J2000.0.
MEAN_LONGITUDE_J2000 = 280.460
MEAN_LONGITUDE_RATE = 0.9856474
MEAN_ANOMALY_J2000 = 357.528
MEAN_ANOMALY_RATE = 0.9856003
CENTER_TERM_1 = 1.915
CENTER_TERM_2 = 0.020
OBLIQUITY_J2000 = 23.439
OBLIQUITY_RATE = -0.0000004


@dataclass(frozen=True)
class SkyPosition:
    """Equatorial coordinates of the sun.

    ``right_ascension`` is in hours ``[0, 24)`` and ``declination`` in degrees.
    Both are floats for a scalar epoch, numpy arrays for an array of epochs.
    """

    right_ascension: ArrayLike
    declination: ArrayLike


def sun_position(day_offset: ArrayLike) -> SkyPosition:
    """Apparent geocentric right ascension and declination of the sun.

    Parameters
    ----------
    day_offset:
        Days since J2000.0 (2000-01-01 12:00 UTC), scalar or array.

    Returns
    -------
    SkyPosition
        Good to roughly one arc-minute between 1950 and 2050, which is
        enough for minute-level rise and set timing.
    """

    d = np.asarray(day_offset, dtype=float)
    mean_longitude = np.mod(MEAN_LONGITUDE_J2000 + MEAN_LONGITUDE_RATE * d, 360.0)
    mean_anomaly = np.radians(np.mod(MEAN_ANOMALY_J2000 + MEAN_ANOMALY_RATE * d, 360.0))

    # Equation of centre, two terms in the mean anomaly.
    ecliptic_longitude = np.radians(
        mean_longitude
        + CENTER_TERM_1 * np.sin(mean_anomaly)
        + CENTER_TERM_2 * np.sin(2.0 * mean_anomaly)
    )
    obliquity = np.radians(OBLIQUITY_J2000 + OBLIQUITY_RATE * d)

    sin_longitude = np.sin(ecliptic_longitude)
    right_ascension = np.degrees(
        np.arctan2(np.cos(obliquity) * sin_longitude, np.cos(ecliptic_longitude))
    )
    right_ascension = np.mod(right_ascension / 15.0, 24.0)
    declination = np.degrees(
        np.arcsin(np.clip(np.sin(obliquity) * sin_longitude, -1.0, 1.0))
    )

    if d.ndim == 0:
        return SkyPosition(float(right_ascension), float(declination))
    return SkyPosition(right_ascension, declination)


def horizontal_coordinates(
    day_offset: float, latitude: float, longitude: float
) -> Tuple[float, float]:
    """Return the sun's ``(altitude, azimuth)`` in degrees for an observer.

    Azimuth is measured from north through east, in ``[0, 360)``.
    """

    position = sun_position(day_offset)
    hour_angle = math.radians(
        local_sidereal_time(day_offset, longitude) - 15.0 * position.right_ascension
    )
    lat = math.radians(latitude)
    dec = math.radians(position.declination)

    sin_altitude = math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(dec) * math.cos(
        hour_angle
    )
    altitude = math.asin(float(np.clip(sin_altitude, -1.0, 1.0)))

    denominator = math.cos(altitude) * math.cos(lat)
    if denominator == 0.0:
        # Zenith or pole: azimuth is undefined.
        return math.degrees(altitude), 0.0
    cos_azimuth = (math.sin(dec) - math.sin(altitude) * math.sin(lat)) / denominator
    azimuth = math.degrees(math.acos(float(np.clip(cos_azimuth, -1.0, 1.0))))
    if math.sin(hour_angle) > 0.0:
        azimuth = 360.0 - azimuth
    if azimuth >= 360.0:
        azimuth -= 360.0
    return math.degrees(altitude), azimuth
