from pydantic import BaseModel, Field
from typing import List, Optional


class ValidationIssue(BaseModel):
    code: str
    message: str
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """Deterministic quality score for one slide (100 is a clean slide)"""
    passed: bool
    score: int
    errors: List[ValidationIssue] = Field(default_factory=list)


class BlockedContent(BaseModel):
    component_index: int
    component_type: str
    field: str
    placeholder_found: str


class ShippingGateResult(BaseModel):
    """Whether a slide is free of placeholder content and may be exported"""
    can_ship: bool
    blocked_content: List[BlockedContent] = Field(default_factory=list)
