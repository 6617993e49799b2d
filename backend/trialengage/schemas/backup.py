"""Backup Schemas."""

from typing import Any

from pydantic import BaseModel


class RestoreRequest(BaseModel):
    companies: Any = None
