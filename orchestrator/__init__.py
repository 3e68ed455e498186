"""
Orchestration package for coordinating folder exports.

This package sequences a Drive folder export:
Resolve folder → List documents → Export each document → Summary.
"""

from .export_orchestrator import ExportOrchestrator

__all__ = [
    'ExportOrchestrator'
]
