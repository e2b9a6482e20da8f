"""Service layer wiring the import pipeline to its collaborators."""
from __future__ import annotations

from .importer import ImportService, NormalizationResult, build_import_service, get_import_service

__all__ = ["ImportService", "NormalizationResult", "build_import_service", "get_import_service"]
