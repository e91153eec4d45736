"""Pydantic schemas for flash messages."""
from typing import Literal

from pydantic import BaseModel

FlashKind = Literal["success", "error"]


class FlashSchema(BaseModel):
    kind: FlashKind
    message: str
