"""
Shared utility functions.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.
    
    Args:
        prefix: Optional prefix (e.g., "excl", "doc")
        
    Returns:
        A unique ID like "excl_a1b2c3d4e5f6"
    """
    uid = str(uuid.uuid4())[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def deep_copy(data: Any) -> Any:
    """Deep copy a JSON-like document."""
    return copy.deepcopy(data)
