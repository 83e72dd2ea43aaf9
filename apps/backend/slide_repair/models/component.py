from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union

from slide_repair.repair.constants import CONTENT_LIMITS, LIST_LIMITS

# Items

class MetricItem(BaseModel):
    """One metric card: a short value over a short label"""
    model_config = {"extra": "allow"}

    value: str = Field(min_length=1, max_length=CONTENT_LIMITS['metric_value'])
    label: str = Field(min_length=1, max_length=CONTENT_LIMITS['metric_label'])
    icon: Optional[str] = None


class StepItem(BaseModel):
    """One step of a process flow"""
    model_config = {"extra": "allow"}

    number: int = Field(ge=1)
    title: Optional[str] = Field(default=None, max_length=CONTENT_LIMITS['step_title'])
    description: Optional[str] = Field(default=None, max_length=CONTENT_LIMITS['step_description'])
    icon: Optional[str] = None


class IconItem(BaseModel):
    model_config = {"extra": "allow"}

    label: str = Field(max_length=CONTENT_LIMITS['icon_label'])
    description: Optional[str] = Field(default=None, max_length=CONTENT_LIMITS['icon_description'])
    icon: Optional[str] = None


class ChartPoint(BaseModel):
    model_config = {"extra": "allow"}

    label: str = Field(default='', max_length=CONTENT_LIMITS['chart_label'])
    value: float


BulletLine = Annotated[str, Field(max_length=CONTENT_LIMITS['bullet'])]


# Components

class ComponentBase(BaseModel):
    """
    Base class for all component kinds.
    Unknown properties are preserved so renderers can read style hints.
    """
    model_config = {"extra": "allow"}


class TextBulletsComponent(ComponentBase):
    type: Literal['text-bullets']
    title: Optional[str] = Field(default=None, max_length=CONTENT_LIMITS['title'])
    content: List[BulletLine] = Field(default_factory=list, max_length=LIST_LIMITS['text-bullets'])


class MetricCardsComponent(ComponentBase):
    type: Literal['metric-cards']
    metrics: List[MetricItem] = Field(min_length=2, max_length=LIST_LIMITS['metric-cards'])


class ProcessFlowComponent(ComponentBase):
    type: Literal['process-flow']
    steps: List[StepItem] = Field(default_factory=list, max_length=LIST_LIMITS['process-flow'])


class IconGridComponent(ComponentBase):
    type: Literal['icon-grid']
    items: List[IconItem] = Field(min_length=1, max_length=LIST_LIMITS['icon-grid'])


class ChartFrameComponent(ComponentBase):
    type: Literal['chart-frame']
    data: List[ChartPoint] = Field(min_length=1)


class DiagramSvgComponent(ComponentBase):
    type: Literal['diagram-svg']


# Create discriminated union based on the 'type' field
SlideComponent = Annotated[
    Union[
        TextBulletsComponent,
        MetricCardsComponent,
        ProcessFlowComponent,
        IconGridComponent,
        ChartFrameComponent,
        DiagramSvgComponent,
    ],
    Field(discriminator='type')
]
