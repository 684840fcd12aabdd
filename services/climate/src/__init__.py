"""
Climate Summary Service

Streaming aggregation of tab-delimited NOAA observation files into
per-state weather summaries.
"""

__version__ = "0.1.0"
