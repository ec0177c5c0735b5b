"""Rate limiting module."""

from .limiter import RateLimiter, RateWindow

__all__ = ["RateLimiter", "RateWindow"]
