"""Export module for SplitEase"""

from .csv_exporter import EXPORT_KINDS, CSVExporter

__all__ = ["CSVExporter", "EXPORT_KINDS"]
