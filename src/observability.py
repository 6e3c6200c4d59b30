"""
Execution tracing for the wizard engine.

Every flow action, sequencing pass and oracle call is wrapped in a span that
logs one structured line on exit:

    [TRACE] rule_oracle.evaluate duration_ms=812.40 status=ok rules=3

Spans work in both sync and async code (they only measure wall time around
the ``with`` block) and never swallow exceptions: a failing block is logged
with ``status=error`` and the exception type, then re-raised.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager

logger = logging.getLogger("leave_intake.trace")


@contextmanager
def trace_span(name: str, **metadata):
    """Log the duration and outcome of the wrapped block."""
    start = time.perf_counter()
    status = "ok"
    try:
        yield
    except Exception as e:
        status = f"error:{type(e).__name__}"
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        meta = " ".join(f"{k}={v}" for k, v in metadata.items())
        logger.info("[TRACE] %s duration_ms=%.2f status=%s %s", name, duration_ms, status, meta)
