"""
API handlers for slide repair
"""
import asyncio
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor
from fastapi import HTTPException

from slide_repair.config import get_config
from slide_repair.models.requests import (
    SlideBatchRepairRequest,
    SlideBatchRepairResponse,
    SlideRepairRequest,
    SlideRepairResponse,
)
from slide_repair.repair.pipeline import repair, repair_slide_model, repair_slides
from slide_repair.setup_logging_optimized import get_logger

logger = get_logger(__name__)

# Create a thread pool executor for running CPU-bound repair work
thread_pool = ThreadPoolExecutor(max_workers=get_config().repair.max_workers)


async def process_slide_repair(request: SlideRepairRequest) -> SlideRepairResponse:
    """
    Repair one slide.

    Args:
        request: Contains the raw slide and an optional output-validation override

    Returns:
        SlideRepairResponse with the repaired slide and its warnings

    Raises:
        SlideRepairError: When typed validation of the repaired slide fails
    """
    validate_output = request.validate_output
    if validate_output is None:
        validate_output = get_config().repair.validate_output

    slide = request.slide
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(thread_pool, repair_slide_model if validate_output else repair, slide)

    return SlideRepairResponse(
        slide=slide,
        warnings=slide.get('warnings', []),
        layout_variant=slide['routerConfig']['layoutVariant'],
        timestamp=datetime.now()
    )


async def process_slide_batch_repair(request: SlideBatchRepairRequest) -> SlideBatchRepairResponse:
    """Repair independent slides in parallel, preserving order."""
    config = get_config()
    if len(request.slides) > config.server.max_batch_size:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(request.slides)} slides exceeds the limit of {config.server.max_batch_size}"
        )

    logger.info(f"Repairing batch of {len(request.slides)} slides")
    loop = asyncio.get_running_loop()
    slides = await loop.run_in_executor(
        thread_pool,
        lambda: repair_slides(request.slides, config.repair.max_workers)
    )

    return SlideBatchRepairResponse(
        slides=slides,
        total_warnings=sum(len(slide.get('warnings', [])) for slide in slides),
        timestamp=datetime.now()
    )
