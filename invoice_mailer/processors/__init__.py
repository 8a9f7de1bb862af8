"""Pipeline stages."""

from .downloader import RetryingDownloader
from .lister import RecordLister
from .merger import DocumentMerger
from .pipeline import PipelineOrchestrator, run_invoice_job
from .router import BundleRouter, Dispatcher

__all__ = [
    "RetryingDownloader",
    "RecordLister",
    "DocumentMerger",
    "PipelineOrchestrator",
    "run_invoice_job",
    "BundleRouter",
    "Dispatcher",
]
