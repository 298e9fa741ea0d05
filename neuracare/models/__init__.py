"""Persisted document models."""

from neuracare.models.document import (
    AIInsights,
    AnalysisRecord,
    ConsentRecord,
    Document,
    LastAnalysis,
    Profile,
    ProfileConsent,
)

__all__ = [
    "AIInsights",
    "AnalysisRecord",
    "ConsentRecord",
    "Document",
    "LastAnalysis",
    "Profile",
    "ProfileConsent",
]
