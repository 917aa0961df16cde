"""JobAZ proofreading core package."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "analysis",
    "cli",
    "highlight",
    "issues",
    "llm",
    "models",
    "utils",
]
