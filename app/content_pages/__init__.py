"""
Public content pages: jobs, health articles, myths and static pages.
"""

from .factory import create_content_pages_module

__all__ = ["create_content_pages_module"]
