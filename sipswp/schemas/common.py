"""Shared request/response pieces for the HTTP API."""

from typing import List

from pydantic import BaseModel, ConfigDict


class RequestModel(BaseModel):
    """Every request field is optional; omitted fields fall back to the calculator defaults."""

    model_config = ConfigDict(extra="forbid")


class PingResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: List[str]
