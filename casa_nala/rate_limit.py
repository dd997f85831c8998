"""
Shared slowapi limiter.

Uses in-memory storage. For several workers, pass
``storage_uri="redis://..."`` to the Limiter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import RATE_LIMIT_ENABLED

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
