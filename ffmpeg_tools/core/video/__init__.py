"""Media inspection."""

from .probe import MediaProber, ProbeError, ProbeResult, parse_probe_output

__all__ = [
    "MediaProber",
    "ProbeError",
    "ProbeResult",
    "parse_probe_output",
]
