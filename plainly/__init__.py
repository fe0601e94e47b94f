"""plainly - relevance ranking and AI extraction core for a one-event-at-a-time news feed."""

__version__ = "0.1.0"
