"""
Visitor Tracking Module

Assigns visitor sessions and records page views, heartbeats and content views.
"""

from .factory import create_visitor_tracking_module
from .services import RequestCookieStore, VisitorTrackingService

__all__ = ["create_visitor_tracking_module", "RequestCookieStore", "VisitorTrackingService"]
