#!/usr/bin/env python3
"""
Main entry point: generate this week's rota from config.yaml and log it.
"""

import sys

from logger import get_logger
from scheduler_service import SchedulerService

logger = get_logger('main')


def run(config_path=None):
    """Generate the current week for `config_path` and log each assignment.

    Returns the GenerationResult for in-process callers.
    """
    service = SchedulerService(config_path)
    result = service.generate_schedule()
    names = {w.id: w.name for w in service.workers}
    for day, per_worker in result.schedule.items():
        for worker_id, templates in per_worker.items():
            shift_names = ", ".join(t.name for t in templates)
            logger.info(f"{day.isoformat()} {names.get(worker_id, worker_id)}: {shift_names}")
    logger.info("\n" + result.coverage.format_report())
    return result


def main(argv=None):
    """Console entry; returns a process exit status."""
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else None
    logger.info("Starting rota generation")
    try:
        run(config_path)
    except Exception as e:
        logger.error(f"Rota generation failed: {e}", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
