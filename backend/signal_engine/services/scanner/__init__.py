"""
Signal Scanner Service

Periodic pass over the configured instruments with duplicate suppression.
"""

from signal_engine.services.scanner.scanner import SignalScanner, ScanReport
from signal_engine.services.scanner.sink import SignalSink, LoggingSink, CollectingSink

__all__ = [
    "SignalScanner",
    "ScanReport",
    "SignalSink",
    "LoggingSink",
    "CollectingSink",
]
