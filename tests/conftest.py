from __future__ import annotations

import math
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import erfa
import numpy as np
import pytest
from fastapi.testclient import TestClient


class ErfaReference:
    """Independent sun positions from ERFA, for comparison with the core model."""

    @staticmethod
    def _timescales(timestamp: int) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        dt = datetime.fromtimestamp(timestamp, UTC)
        utc1, utc2 = erfa.dtf2d(
            "UTC", dt.year, dt.month, dt.day, dt.hour, dt.minute, float(dt.second)
        )
        tai1, tai2 = erfa.utctai(utc1, utc2)
        tt = erfa.taitt(tai1, tai2)
        ut1 = erfa.utcut1(utc1, utc2, 0.0)
        return tt, ut1

    @staticmethod
    def _sun_gcrs(tt: Tuple[float, float]) -> np.ndarray:
        pvh, _ = erfa.epv00(*tt)
        return -np.asarray(pvh["p"], dtype=float)

    def ra_dec(self, timestamp: int) -> Tuple[float, float]:
        """True right ascension and declination of date, both in degrees."""

        tt, _ = self._timescales(timestamp)
        rnpb = np.array(erfa.pnm06a(*tt), dtype=float)
        ra, dec = erfa.c2s(rnpb @ self._sun_gcrs(tt))
        return math.degrees(float(ra)) % 360.0, math.degrees(float(dec))

    def alt_az(self, timestamp: int, lat: float, lon: float) -> Tuple[float, float]:
        """Geocentric altitude and azimuth in degrees."""

        tt, ut1 = self._timescales(timestamp)
        rotation = np.array(erfa.c2t06a(*tt, *ut1, 0.0, 0.0), dtype=float)
        sun = rotation @ self._sun_gcrs(tt)
        sun /= np.linalg.norm(sun)
        phi, lam = math.radians(lat), math.radians(lon)
        up = np.array([math.cos(phi) * math.cos(lam), math.cos(phi) * math.sin(lam), math.sin(phi)])
        east = np.array([-math.sin(lam), math.cos(lam), 0.0])
        north = np.array(
            [-math.sin(phi) * math.cos(lam), -math.sin(phi) * math.sin(lam), math.cos(phi)]
        )
        altitude = math.degrees(math.asin(float(np.clip(np.dot(sun, up), -1.0, 1.0))))
        azimuth = math.degrees(math.atan2(float(np.dot(sun, east)), float(np.dot(sun, north))))
        return altitude, azimuth % 360.0


@pytest.fixture(scope="session")
def reference() -> ErfaReference:
    return ErfaReference()


@pytest.fixture(scope="session")
def api_client() -> Iterable[TestClient]:
    from sunrise_api import app

    with TestClient(app) as client:
        yield client
