r"""Reverse-engineering analysis of legacy code, schemas and documents.

Public API:
    - AsyncAnalysisClient: LLM client with a retried completion call
    - MockAnalyzer: Offline analyzer returning a fixed result
    - AnalysisService: Payload guards in front of an analyzer
    - read_files / ingest_file: File and archive ingestion
    - AnalyzeRequest / AnalysisResult / SourceFile: Data models
"""

from __future__ import annotations

__all__ = [
    "AnalysisResult",
    "AnalysisService",
    "AnalyzeRequest",
    "Analyzer",
    "AsyncAnalysisClient",
    "MockAnalyzer",
    "SourceFile",
    "build_messages",
    "estimate_bytes",
    "infer_file_type",
    "ingest_file",
    "read_files",
]

from legacylens.analysis.client import AsyncAnalysisClient
from legacylens.analysis.ingest import estimate_bytes, infer_file_type, ingest_file, read_files
from legacylens.analysis.mock import MockAnalyzer
from legacylens.analysis.models import AnalysisResult, AnalyzeRequest, SourceFile
from legacylens.analysis.prompt import build_messages
from legacylens.analysis.service import AnalysisService, Analyzer
