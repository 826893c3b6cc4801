"""Attention-unit clustering of event-camera streams with FIFO and activity-map trackers."""

__version__ = "0.1.0"
__all__ = ["params", "fifo_tracker", "amap_tracker", "cli"]