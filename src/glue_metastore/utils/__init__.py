"""
Utilities for segment planning and retrieval statistics.
"""

from .segment_utils import ScanMode, ScanPlan, Segment, SegmentPlanner, chunked
from .stats import FetchStats

__all__ = ["FetchStats", "ScanMode", "ScanPlan", "Segment", "SegmentPlanner", "chunked"]
