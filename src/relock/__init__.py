"""
relock: stability-aware lock file recomputation.

When a manifest changes, only the requirements whose ranges actually moved get
a new resolution; everything else stays pinned to the previous lock.
"""

from .core.pipeline import relock

__version__ = "0.1.0"

__all__ = ["relock", "__version__"]
