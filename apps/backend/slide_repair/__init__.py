"""
slide_repair: structural repair and normalization for generated slide trees.
"""

from slide_repair.repair.pipeline import repair, repair_slide_model, repair_slides
from slide_repair.services.shipping_gate import check_shipping_gate
from slide_repair.services.slide_quality_validator import validate_slide

__version__ = "0.1.0"

__all__ = [
    'repair',
    'repair_slides',
    'repair_slide_model',
    'validate_slide',
    'check_shipping_gate',
]
