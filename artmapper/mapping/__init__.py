"""Mapping layer - turn stored-function rows into typed records."""

from __future__ import annotations

from artmapper.mapping.model import ModelMapper

__all__ = [
    "ModelMapper",
]
