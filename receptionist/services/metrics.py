"""CloudWatch custom metrics emitter with background batching.

Tracks the three things worth alerting on in the receptionist:

* model invocations (count, latency, error type),
* tool executions (count by tool and outcome),
* store decode failures (a corrupt or tampered collection blob).

Metrics are buffered in memory and flushed by a daemon thread every
``FLUSH_INTERVAL_SECONDS`` when ``METRICS_ENABLED=true``.  Locally they are
only logged at DEBUG.

Usage
-----
>>> from receptionist.services.metrics import metrics
>>> metrics.record_model_call("claude-sonnet-4-5", latency_ms=812.0)
>>> metrics.record_tool_execution("bookAppointment", success=True)
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "NexusReceptionist"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call


class MetricsClient:
    """Batched CloudWatch metrics publisher."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None

        if self._enabled:
            self._start_flush_thread()

    def _get_cw_client(self):
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Public API ────────────────────────────────────────────────────

    def record_model_call(
        self,
        model: str,
        latency_ms: float,
        error_type: str | None = None,
    ) -> None:
        """Record one model invocation; *error_type* marks it as failed."""
        status = "failure" if error_type else "success"
        self._point("Model/RequestCount", 1, "Count", Model=model, Status=status)
        self._point("Model/Latency", latency_ms, "Milliseconds", Model=model)
        if error_type:
            self._point("Model/ErrorCount", 1, "Count", Model=model, ErrorType=error_type)
        logger.debug(
            "Metric: model %s %s latency=%.1fms", model, status, latency_ms,
        )

    def record_tool_execution(self, tool: str, success: bool) -> None:
        status = "success" if success else "failure"
        self._point("Tool/ExecutionCount", 1, "Count", Tool=tool, Status=status)
        logger.debug("Metric: tool %s %s", tool, status)

    def record_decode_failure(self, collection: str) -> None:
        self._point("Store/DecodeErrorCount", 1, "Count", Collection=collection)

    def flush(self) -> int:
        """Send buffered metrics to CloudWatch.  Returns count sent."""
        with self._lock:
            if not self._buffer:
                return 0
            batch = self._buffer[:]
            self._buffer.clear()

        if not self._enabled:
            logger.debug("Metrics flush skipped (not enabled): %d items", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for i in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[i : i + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    # ── Internal ──────────────────────────────────────────────────────

    def _point(self, name: str, value: float, unit: str, **dimensions: str) -> None:
        datum = {
            "MetricName": name,
            "Dimensions": [{"Name": k, "Value": v} for k, v in dimensions.items()],
            "Timestamp": datetime.now(UTC),
            "Value": value,
            "Unit": unit,
        }
        with self._lock:
            self._buffer.append(datum)

    def _start_flush_thread(self) -> None:
        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        t = threading.Thread(target=_loop, daemon=True, name="metrics-flush")
        t.start()
        atexit.register(self.flush)
        logger.info(
            "Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS,
        )


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
