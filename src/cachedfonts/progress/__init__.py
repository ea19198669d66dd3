"""Progress display adapters."""

from cachedfonts.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
