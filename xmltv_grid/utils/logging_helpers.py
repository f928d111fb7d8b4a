"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging without excessive decorative separators.
"""
import logging


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_source_processing(logger: logging.Logger, idx: int, total: int, source: str) -> None:
    """
    Log source processing header.

    Args:
        logger: Logger instance
        idx: Current source index (1-based)
        total: Total number of sources
        source: File path or description of the source being processed
    """
    logger.info(f"Processing source {idx}/{total}: {source}")


def log_parse_summary(
    logger: logging.Logger,
    channels_count: int,
    programs_kept: int,
    programs_skipped: int
) -> None:
    """
    Log parse operation summary.

    Args:
        logger: Logger instance
        channels_count: Number of channels built
        programs_kept: Number of programmes added to a schedule
        programs_skipped: Number of programmes outside the time window
    """
    logger.info(
        f"Parse summary - Channels: {channels_count}, "
        f"Programs: {programs_kept} kept, {programs_skipped} outside window"
    )


def log_grid_stats(logger: logging.Logger, total_channels: int, total_entries: int) -> None:
    """
    Log grid assembly statistics.

    Args:
        logger: Logger instance
        total_channels: Channels handed to the grid
        total_entries: Schedule entries across all channels
    """
    logger.info(f"Building grid: {total_channels} channels, {total_entries} schedule entries")
