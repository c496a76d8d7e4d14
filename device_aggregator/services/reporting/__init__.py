"""
Reporting - read-only presentation of the aggregated values

- reporter.py - Periodic summary line
- status_server.py - HTTP status endpoints (optional)
"""

from .reporter import Reporter, Summary, log_sink, summarize
from .status_server import StatusServer

__all__ = ["Reporter", "Summary", "log_sink", "summarize", "StatusServer"]
