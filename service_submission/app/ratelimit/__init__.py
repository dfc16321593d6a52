"""
Rate limiting package for the submission service.

Holds the fixed-window quota limiter that bounds outbound calls per
period and queues callers fairly when the window is exhausted.
"""

from .quota_limiter import QuotaLimiter, RateWindow

__all__ = ["QuotaLimiter", "RateWindow"]
