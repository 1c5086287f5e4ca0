"""Sun rise/set event search for the Horizon Events API."""

from .astro import SR_WINDOW, TWILIGHT_ANGLES, SearchWindowError, SunRiseResult, calculate

__all__ = ["calculate", "SunRiseResult", "SearchWindowError", "SR_WINDOW", "TWILIGHT_ANGLES"]
