"""Pydantic models for API requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    timestamp: int = Field(
        ..., description="Query instant in UTC seconds since the Unix epoch"
    )
    twilight: Twilight = Field(Twilight.official, description="Twilight definition")
    window_hours: Optional[int] = Field(
        None,
        ge=2,
        le=240,
        description="Search window in hours centred on the query instant",
    )

    @field_validator("window_hours")
    @classmethod
    def validate_window_hours(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        if value % 2:
            raise ValueError("window_hours must be an even number of hours")
        return value


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    twilight: Twilight = Field(..., description="Applied twilight definition")
    window_hours: int = Field(..., description="Search window in hours")
    query_time: int = Field(..., description="Query instant, UTC epoch seconds")
    query_utc: str = Field(..., description="Query instant in UTC (ISO-8601)")
    has_rise: bool
    has_set: bool
    is_visible: bool = Field(..., description="Sun above the horizon at the query instant")
    rise_time: Optional[int] = Field(None, description="Sunrise, UTC epoch seconds")
    set_time: Optional[int] = Field(None, description="Sunset, UTC epoch seconds")
    rise_utc: Optional[str] = Field(None, description="Sunrise time in UTC (ISO-8601)")
    set_utc: Optional[str] = Field(None, description="Sunset time in UTC (ISO-8601)")
    rise_az: Optional[float] = Field(None, description="Sunrise azimuth, degrees from north")
    set_az: Optional[float] = Field(None, description="Sunset azimuth, degrees from north")


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    window_hours: int
    twilight: Twilight
    twilight_angles: Dict[str, float]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
