from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from slide_repair.models.validation import ShippingGateResult, ValidationResult


class SlideRepairRequest(BaseModel):
    """A single generator-produced slide to repair"""
    slide: Dict[str, Any] = Field(description="Raw slide tree as produced by the content/layout generators")
    validate_output: Optional[bool] = Field(
        default=None,
        description="Validate the repaired slide against the typed model (defaults to REPAIR_VALIDATE_OUTPUT)"
    )


class SlideRepairResponse(BaseModel):
    slide: Dict[str, Any]
    warnings: List[str]
    layout_variant: str
    timestamp: datetime


class SlideBatchRepairRequest(BaseModel):
    """Independent slides repaired in parallel; order is preserved"""
    slides: List[Dict[str, Any]] = Field(description="Slides to repair")


class SlideBatchRepairResponse(BaseModel):
    slides: List[Dict[str, Any]]
    total_warnings: int
    timestamp: datetime


class SlideValidateRequest(BaseModel):
    slide: Dict[str, Any]
    repair_first: bool = Field(default=True, description="Repair the slide before scoring it")


class SlideValidateResponse(BaseModel):
    slide: Dict[str, Any]
    validation: ValidationResult
    shipping_gate: ShippingGateResult
    timestamp: datetime
