"""
Audit Log Module

Admin viewer for the audit trail of content mutations.
"""

from .factory import create_audit_log_module

__all__ = ["create_audit_log_module"]
