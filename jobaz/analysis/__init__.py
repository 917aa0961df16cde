"""Issue producers: the offline rule analyzer and the LLM-backed analyzer."""

from __future__ import annotations

from .llm_analyzer import LLMProofreader
from .rules import AnalysisOptions, ProofreadingAnalysis, analyze_text, score_issues

__all__ = [
    "AnalysisOptions",
    "LLMProofreader",
    "ProofreadingAnalysis",
    "analyze_text",
    "score_issues",
]
