#!/usr/bin/env python3
"""
Scan Summary Exceptions Module

Custom exception classes for the finding summary engine.
Centralized exception definitions for consistent error handling.
"""

__all__ = [
    "ScanSummaryError",
    "PayloadParseError",
    "ConfigurationError",
]


class ScanSummaryError(Exception):
    """Base exception for all scan-summary errors"""
    pass


class PayloadParseError(ScanSummaryError):
    """Raised when a raw scanner payload cannot be decoded.

    Only raised inside the parser and adapter modules; their public
    functions catch it and return an empty result.
    """
    pass


class ConfigurationError(ScanSummaryError):
    """Raised when configuration is invalid or cannot be loaded"""
    pass
