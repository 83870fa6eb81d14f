"""End-to-end comparison pipeline.

Runs the design and page collaborators concurrently, compares their
output, and races the whole run against a wall-clock timeout. Every
failure leaves this module as a categorized DesignQAError.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from .collectors.dom import DomSnapshotCollector, load_rendered_elements
from .collectors.figma import load_design_elements
from .comparator import DesignComparator
from .config import PIPELINE_TIMEOUT_SECONDS, CaptureConfig
from .errors import ComparisonTimeoutError, DesignQAError, classify_error
from .models import ComparisonResult, DesignElement, RenderedElement
from .qa_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.PIPELINE)

DesignSource = Callable[[], Awaitable[list[DesignElement]]]
RenderedSource = Callable[[], Awaitable[list[RenderedElement]]]


def design_file_source(path: Path | str, frame_id: str | None = None) -> DesignSource:
    """Source reading design elements from a JSON file."""

    async def _load() -> list[DesignElement]:
        return await asyncio.to_thread(load_design_elements, path, frame_id)

    return _load


def snapshot_file_source(path: Path | str) -> RenderedSource:
    """Source reading rendered elements from a saved DOM snapshot."""

    async def _load() -> list[RenderedElement]:
        return await asyncio.to_thread(load_rendered_elements, path)

    return _load


def live_page_source(url: str, config: CaptureConfig | None = None) -> RenderedSource:
    """Source capturing rendered elements from a live URL."""

    async def _capture() -> list[RenderedElement]:
        async with DomSnapshotCollector(config) as collector:
            return await collector.collect(url)

    return _capture


async def run_pipeline(
    design_source: DesignSource,
    rendered_source: RenderedSource,
    comparator: DesignComparator | None = None,
    timeout_seconds: float = PIPELINE_TIMEOUT_SECONDS,
) -> ComparisonResult:
    """Collect both element lists and compare them under a timeout.

    Args:
        design_source: Async callable returning design elements.
        rendered_source: Async callable returning rendered elements.
        comparator: Comparator to use. Defaults to DesignComparator().
        timeout_seconds: Wall-clock budget for the whole run.

    Returns:
        The comparison result.

    Raises:
        ComparisonTimeoutError: If the run exceeds ``timeout_seconds``.
        DesignQAError: For any other failure, categorized.
    """
    comparator = comparator or DesignComparator()
    start = time.perf_counter()

    async def _run() -> ComparisonResult:
        tasks = (
            asyncio.create_task(design_source()),
            asyncio.create_task(rendered_source()),
        )
        try:
            design, rendered = await asyncio.gather(*tasks)
        except BaseException:
            # No collaborator outlives a failed or timed-out run.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        logger.debug(
            f"Collected {len(design)} design and {len(rendered)} rendered elements"
        )
        return await comparator.compare(design, rendered)

    try:
        result = await asyncio.wait_for(_run(), timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        logger.error(f"Comparison timed out after {timeout_seconds}s")
        raise ComparisonTimeoutError(timeout_seconds) from e
    except DesignQAError as e:
        logger.error(f"Comparison failed ({e.category.value}): {e.message}")
        raise
    except Exception as e:
        error = classify_error(e)
        logger.error(f"Comparison failed ({error.category.value}): {error.message}")
        raise error from e

    logger.info(
        f"Pipeline finished: overall {result.overall_score:.1f}",
        extra={
            "operation": "pipeline",
            "duration_ms": round((time.perf_counter() - start) * 1000, 2),
        },
    )
    return result
