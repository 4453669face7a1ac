"""
Logging for the rota engine.

Every module logs through a child of the `rota` logger, e.g.
`get_logger('engine')` -> `rota.engine`. Timings go to `rota.perf`.
Set ROTA_LOG_TO_FILE=0 to keep output on the console only, and
ROTA_LOG_LEVEL to change the level (default INFO).
"""

import functools
import logging
import os
import time
from contextlib import contextmanager
from datetime import datetime

ROOT_LOGGER_NAME = 'rota'

LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
LOG_FILE = os.path.join(LOG_DIR, f"rota_{datetime.now():%Y%m%d}.log")

LOG_FORMAT = '%(asctime)s %(levelname)-7s [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _handler(handler, level):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level=logging.INFO, log_to_file=True):
    """(Re)configure the `rota` logger and return it.

    Calling it again replaces the handlers rather than stacking them.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_handler(logging.StreamHandler(), level))

    if log_to_file:
        os.makedirs(LOG_DIR, exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(LOG_FILE, encoding='utf-8'), level))
    return root


def get_logger(name=None):
    """Return `rota.<name>`, or the `rota` logger itself when no name is given."""
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}' if name else ROOT_LOGGER_NAME)


@contextmanager
def log_timing(operation_name: str, logger_instance=None):
    """Log how long the enclosed block took, including when it raises."""
    log = logger_instance or get_logger('perf')
    start = time.perf_counter()
    failed = None
    try:
        yield
    except Exception as e:
        failed = type(e).__name__
        raise
    finally:
        elapsed = time.perf_counter() - start
        if failed:
            log.error(f"{operation_name}: {elapsed:.4f}s (failed with {failed})")
        else:
            log.info(f"{operation_name}: {elapsed:.4f}s")


def timed(func=None, *, name=None):
    """Decorator form of `log_timing`; usable bare or as `@timed(name=...)`."""
    def decorator(fn):
        label = name or fn.__qualname__

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            with log_timing(label):
                return fn(*args, **kwargs)

        return wrapper

    return decorator(func) if func is not None else decorator


logger = setup_logging(
    level=os.environ.get('ROTA_LOG_LEVEL', 'INFO').upper(),
    log_to_file=os.environ.get('ROTA_LOG_TO_FILE', '1') != '0',
)
