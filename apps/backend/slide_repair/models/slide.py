from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional

from slide_repair.models.component import SlideComponent
from slide_repair.repair.constants import MAX_SPEAKER_NOTES
from slide_repair.repair.layouts import VARIANT_NAMES, is_compatible


class DensityBudget(BaseModel):
    """Soft per-item / per-character ceilings supplied by the caller"""
    model_config = {"extra": "allow"}

    maxItems: Optional[float] = None
    maxChars: Optional[float] = None
    minVisuals: Optional[float] = None


class RouterConfig(BaseModel):
    model_config = {"extra": "allow"}

    layoutVariant: str
    densityBudget: Optional[DensityBudget] = None

    @field_validator('layoutVariant')
    @classmethod
    def known_variant(cls, value: str) -> str:
        if value not in VARIANT_NAMES:
            raise ValueError(f"Unknown layout variant: {value}")
        return value


class LayoutPlan(BaseModel):
    model_config = {"extra": "allow"}

    title: Optional[str] = None
    components: List[SlideComponent] = Field(default_factory=list)


class SelfCritique(BaseModel):
    model_config = {"extra": "allow"}

    layoutAction: Literal['keep', 'simplify', 'shrink_text', 'add_visuals'] = 'keep'
    readabilityScore: float = Field(default=8, ge=0, le=10)
    textDensityStatus: Literal['optimal', 'high', 'overflow'] = 'optimal'


class SlideNode(BaseModel):
    """
    A repaired slide.

    Attributes:
        routerConfig: Layout variant and density budget, always compatible
            with the component set
        layoutPlan: Title and ordered components, every one of a canonical kind
        speakerNotesLines: Between 1 and 5 presenter notes
        selfCritique: Generator self-assessment, normalized to closed vocabularies
        warnings: Every repair action taken, without duplicates
    """
    model_config = {"extra": "allow"}

    title: Optional[str] = None
    routerConfig: RouterConfig
    layoutPlan: LayoutPlan
    speakerNotesLines: List[str] = Field(min_length=1, max_length=MAX_SPEAKER_NOTES)
    selfCritique: Optional[SelfCritique] = None
    warnings: List[str] = Field(default_factory=list)

    @field_validator('warnings')
    @classmethod
    def unique_warnings(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("warnings must not contain duplicates")
        return value

    @model_validator(mode='after')
    def variant_fits_components(self) -> 'SlideNode':
        kinds = [component.type for component in self.layoutPlan.components]
        if not is_compatible(self.routerConfig.layoutVariant, kinds):
            raise ValueError(
                f"Layout variant {self.routerConfig.layoutVariant} is incompatible with components {kinds}"
            )
        return self
