"""
Protocol-independent building blocks: polling and secure buffers.
"""

from ksef_client.core.poller import NOT_READY, Fatal, NotReady, Ready, poll_until
from ksef_client.core.secure_bytes import SecureBytes

__all__ = ["NOT_READY", "Fatal", "NotReady", "Ready", "SecureBytes", "poll_until"]
