import asyncio
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Tuple

from slide_repair.models.requests import SlideValidateRequest, SlideValidateResponse
from slide_repair.models.validation import ShippingGateResult, ValidationResult
from slide_repair.repair.pipeline import repair
from slide_repair.services.shipping_gate import check_shipping_gate
from slide_repair.services.slide_quality_validator import validate_slide
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

thread_pool = ThreadPoolExecutor(max_workers=4)


def _score(slide: Dict[str, Any], repair_first: bool) -> Tuple[ValidationResult, ShippingGateResult]:
    if repair_first:
        repair(slide)
    return validate_slide(slide), check_shipping_gate(slide)


async def process_slide_validate(request: SlideValidateRequest) -> SlideValidateResponse:
    """
    Score a slide and run the placeholder shipping gate, repairing it first unless told not to
    """
    # Repair and scoring are CPU-bound
    loop = asyncio.get_running_loop()
    validation, shipping_gate = await loop.run_in_executor(
        thread_pool,
        lambda: _score(request.slide, request.repair_first)
    )

    if not validation.passed or not shipping_gate.can_ship:
        logger.info(
            f"Slide validation: score={validation.score} passed={validation.passed} can_ship={shipping_gate.can_ship}"
        )

    return SlideValidateResponse(
        slide=request.slide,
        validation=validation,
        shipping_gate=shipping_gate,
        timestamp=datetime.now()
    )
