"""
Maintenance tasks
"""

from glance.tasks.cleanup_sweep import run_cleanup_sweep

__all__ = ["run_cleanup_sweep"]
