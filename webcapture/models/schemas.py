"""
Pydantic Models and Schemas
===========================

Data models for capture options, capture results and API responses.
Option records are frozen once validated.
"""

from typing import Optional
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class CaptureDefaults(BaseModel):
    """Defaults substituted for options a caller leaves out."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(1920, gt=0, description="Viewport width")
    height: int = Field(1080, gt=0, description="Viewport height")
    scale: float = Field(1.0, gt=0, description="Device pixel ratio")
    quality: int = Field(80, ge=0, le=100, description="WebP quality (0-100)")
    full_page: bool = Field(False, description="Capture full page instead of viewport")


class CaptureOptions(BaseModel):
    """Validated, fully populated options for one capture."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Absolute URL to render")
    width: int = Field(..., gt=0, description="Viewport width")
    height: int = Field(..., gt=0, description="Viewport height")
    scale: float = Field(..., gt=0, description="Device pixel ratio")
    quality: int = Field(..., ge=0, le=100, description="WebP quality (0-100)")
    full_page: bool = Field(..., description="Capture full page instead of viewport")
    filename: Optional[str] = Field(None, description="Caller-supplied output filename")


class CaptureResult(BaseModel):
    """Result of a completed capture."""

    filename: str = Field(..., description="Name of the written file")
    path: Path = Field(..., description="Absolute path of the written file")
    file_size: int = Field(..., ge=0, description="File size in bytes")


# API Response Models
class ResolvedOptions(BaseModel):
    """Options echoed back to the caller after defaults are applied."""

    model_config = ConfigDict(populate_by_name=True)

    width: int
    height: int
    scale: float
    quality: int
    full_page: bool = Field(..., alias="fullPage")
    filename: Optional[str] = None

    @classmethod
    def from_options(cls, options: CaptureOptions) -> "ResolvedOptions":
        return cls(
            width=options.width,
            height=options.height,
            scale=options.scale,
            quality=options.quality,
            full_page=options.full_page,
            filename=options.filename,
        )


class CaptureResponse(BaseModel):
    """Response model for a successful capture."""

    success: bool = Field(True, description="Whether the capture succeeded")
    message: str = Field("Screenshot captured successfully", description="Status message")
    filename: str = Field(..., description="Generated filename")
    timestamp: int = Field(..., description="Completion time in epoch milliseconds")
    options: ResolvedOptions = Field(..., description="Options used for the capture")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="Additional error details")
