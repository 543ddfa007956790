"""Tests for telemetry sinks."""

import logging
import threading

from tfmodules.telemetry import LoggingTelemetry
from tfmodules.telemetry import NullTelemetry


def test_counters_accumulate():
    """Increments add up per counter name; unknown names read as zero."""
    telemetry = LoggingTelemetry()

    telemetry.increment("modules")
    telemetry.increment("blocks", 5)
    telemetry.increment("blocks", 2)

    assert telemetry.snapshot() == {"modules": 1, "blocks": 7}
    assert telemetry.count("missing") == 0


def test_concurrent_increments():
    """Increments from several threads are not lost."""
    telemetry = LoggingTelemetry()

    def work():
        for _ in range(1000):
            telemetry.increment("modules")

    threads = [threading.Thread(target=work) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert telemetry.count("modules") == 4000


def test_trace_goes_to_debug_log(caplog):
    caplog.set_level(logging.DEBUG, logger="tfmodules.telemetry")

    LoggingTelemetry().trace("Loaded module '/x'")

    assert "Loaded module '/x'" in caplog.text


def test_null_telemetry_accepts_calls():
    """NullTelemetry satisfies the protocol and discards everything."""
    telemetry = NullTelemetry()

    telemetry.increment("modules")
    telemetry.trace("ignored")
