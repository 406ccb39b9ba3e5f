"""
Visitor Stats Module

Provides analytics and statistics for admin users to monitor website usage.
"""

from .factory import create_visitor_stats_module

__all__ = ["create_visitor_stats_module"]
