"""Analysis pipeline for Mondo new term requests."""

from ntrcheck.pipeline.orchestrator import analyze_issue, run_analysis

__all__ = ["analyze_issue", "run_analysis"]
