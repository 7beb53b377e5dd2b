"""KPI text report and chart export."""

from .report import KPIReporter, ChartExporter

__all__ = ['KPIReporter', 'ChartExporter']
