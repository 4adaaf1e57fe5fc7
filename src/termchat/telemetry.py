"""Best-effort usage counter invoked on each user action."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)

TelemetrySink = Callable[[str, Mapping[str, Any]], None]


class Telemetry:
    """Count events and forward them to an optional sink.

    Recording never raises: telemetry must not disturb editing or messaging.
    """

    def __init__(self, verbose: bool = False, sink: TelemetrySink | None = None) -> None:
        self.verbose = verbose
        self._sink = sink
        self._event_count = 0

    def record(self, event: str, attributes: Mapping[str, Any] | None = None) -> None:
        self._event_count += 1
        payload = dict(attributes or {})
        try:
            if self.verbose:
                LOGGER.info(
                    "telemetry.%s",
                    event,
                    extra={
                        "event": "telemetry.record",
                        "telemetry_event": event,
                        "attributes": payload,
                    },
                )
            if self._sink is not None:
                self._sink(event, payload)
        except Exception as exc:  # noqa: BLE001 - telemetry failures are swallowed.
            LOGGER.debug(
                "telemetry.record.failed",
                extra={
                    "event": "telemetry.record.failed",
                    "telemetry_event": event,
                    "error_type": type(exc).__name__,
                },
            )

    def get_summary(self) -> dict[str, int]:
        return {"total_events": self._event_count}
