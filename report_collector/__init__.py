"""Ingestion endpoint for browser security-policy violation reports."""

from report_collector.handler import ReportHandler, create_handler, report_handler

__all__ = ["ReportHandler", "create_handler", "report_handler"]
