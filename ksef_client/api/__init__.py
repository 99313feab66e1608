"""
KSeF API client layer.

Provides async HTTP communication with the KSeF API.
"""

from ksef_client.api.http_client import AsyncHttpClient, sanitize_for_log

__all__ = ["AsyncHttpClient", "sanitize_for_log"]
