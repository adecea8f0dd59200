"""
Addressimport: address hierarchy import.

This package validates flat CSV files describing regions, provinces, local
government units and barangays, and replaces the stored hierarchy with the
normalized, deduplicated entity sets they encode.
"""

from importlib.metadata import version

__version__ = version("addressimport")

__all__ = ["__version__"]
