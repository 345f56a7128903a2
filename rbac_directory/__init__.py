"""
rbac_directory package initializer.
"""

from . import directory
from . import storage

__all__ = ["directory", "storage"]
