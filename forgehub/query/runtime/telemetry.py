"""Structured logging for fan-out paging.

This module provides telemetry hooks for the paging coordinator, emitting
structured logs for observability.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_fanout_planned(
    *,
    provider_id: str,
    total_units: int,
    resumed: bool,
    max_concurrency: int | None = None,
) -> None:
    """Log a fan-out plan.

    Args:
        provider_id: Provider identifier
        total_units: Number of units that will be queried
        resumed: Whether units came from a caller cursor rather than fresh input
        max_concurrency: Concurrency bound in effect (None if unbounded)
    """
    logger.info(
        "fanout_planned",
        extra={
            "provider_id": provider_id,
            "total_units": total_units,
            "resumed": resumed,
            "max_concurrency": max_concurrency,
        },
    )


def log_unit_completed(
    *,
    provider_id: str,
    unit: str,
    unit_index: int,
    values: int,
    more: bool,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single unit call.

    Args:
        provider_id: Provider identifier
        unit: Unit label (repository or project path)
        unit_index: Position of the unit in the merge order
        values: Number of values the unit returned
        more: Whether the unit reported more pages
        latency_ms: Latency in milliseconds (optional)
    """
    logger.debug(
        "unit_completed",
        extra={
            "provider_id": provider_id,
            "unit": unit,
            "unit_index": unit_index,
            "values": values,
            "more": more,
            "latency_ms": latency_ms,
        },
    )


def log_unit_error(
    *,
    provider_id: str,
    unit: str,
    unit_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a unit call failure.

    Args:
        provider_id: Provider identifier
        unit: Unit label (repository or project path)
        unit_index: Position of the unit in the merge order
        error_type: Type of error (e.g., "ClientResponseError", "TimeoutError")
        error_message: Error message
    """
    logger.error(
        "unit_error",
        extra={
            "provider_id": provider_id,
            "unit": unit,
            "unit_index": unit_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_fanout_complete(
    *,
    provider_id: str,
    total_units: int,
    total_values: int,
    remaining_units: int,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a fan-out.

    Args:
        provider_id: Provider identifier
        total_units: Number of units queried
        total_values: Number of values in the merged page
        remaining_units: Units still paginating (entries in the new cursor)
        total_latency_ms: Total latency in milliseconds (optional)
    """
    logger.info(
        "fanout_complete",
        extra={
            "provider_id": provider_id,
            "total_units": total_units,
            "total_values": total_values,
            "remaining_units": remaining_units,
            "more": remaining_units > 0,
            "total_latency_ms": total_latency_ms,
        },
    )
