"""
Orchestrator Package.

Process-level wiring: start-up warm-up and the `docmodel` CLI.
"""

from .warmup import build_synchronizer, ensure_design_documents, warm_up

__all__ = [
    "build_synchronizer",
    "ensure_design_documents",
    "warm_up",
]
