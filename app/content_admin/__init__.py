"""
Admin content management for jobs, articles and myths.
"""

from .factory import create_content_admin_module

__all__ = ["create_content_admin_module"]
