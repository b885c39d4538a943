"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["UP", "DOWN"] = Field(description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    message: str = Field(description="Human-readable summary")
    user_count: int | None = Field(default=None, description="Users currently in the store")
    data_file_accessible: bool = Field(description="Whether the user data file can be read")
    data_file_path: str = Field(description="Absolute path of the user data file")
