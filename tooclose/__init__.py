"""
tooclose - airborne near-miss detection for BaseStation (SBS-1) feeds.

Tracks aircraft from a dump1090-style port 30003 stream and reports pairs
that come within a small horizontal and vertical separation at the same
instant.
"""

__version__ = "1.0.0"
