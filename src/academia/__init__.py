"""Academia Pro - multi-tenant access control for school management.

Session authentication, school context resolution and delegated
administration for a school management platform.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
