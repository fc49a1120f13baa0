"""Structured error detail embedded in failed tasks."""

from __future__ import annotations

from typing import Optional

from .base import SchemaBase


class ErrorDetail(SchemaBase):
    name: str
    message: str
    code: Optional[int] = None
