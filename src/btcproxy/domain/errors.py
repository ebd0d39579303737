# src/btcproxy/domain/errors.py
"""
Error taxonomy. None of these are retried by the service layer; they surface
at the HTTP boundary as a status code and an `{"error": ...}` body.
"""

from typing import Optional


class PriceProxyError(Exception):
    """Base class for every failure raised by the price services."""


class ValidationError(PriceProxyError):
    """Malformed caller input. Raised before any network or storage I/O."""


class UpstreamError(PriceProxyError):
    """Transport failure, timeout or non-success status from the upstream API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NoDataError(PriceProxyError):
    """Upstream answered, but had nothing usable for the request."""


class DataShapeError(PriceProxyError):
    """Upstream payload is missing fields we depend on."""
