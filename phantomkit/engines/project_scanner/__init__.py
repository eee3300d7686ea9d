"""Project scanner engine — fingerprint a directory and synthesize manifests."""

from phantomkit.engines.project_scanner.models import (
    DetectionResult,
    Ecosystem,
    Language,
    RenderedManifests,
    RuntimePolicy,
)
from phantomkit.engines.project_scanner.resolver import resolve
from phantomkit.engines.project_scanner.synthesizer import render

__all__ = [
    "DetectionResult",
    "Ecosystem",
    "Language",
    "RenderedManifests",
    "RuntimePolicy",
    "render",
    "resolve",
]
