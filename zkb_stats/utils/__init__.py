"""Utility modules for common functionality."""

from zkb_stats.utils.http import LinearRetry, create_session, request_json

__all__ = ['LinearRetry', 'create_session', 'request_json']
