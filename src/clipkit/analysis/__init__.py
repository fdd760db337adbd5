"""Quality analysis passes over parsed clippings."""

from .processor import ProcessingReport, ProcessOptions, process_clippings

__all__ = ["ProcessingReport", "ProcessOptions", "process_clippings"]
