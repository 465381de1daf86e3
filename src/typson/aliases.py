from __future__ import annotations

from typing import Any

__all__ = ["TypeForm"]

TypeForm = Any
"""Type alias for the type hints typson (de)serializes, as written in annotations"""
