"""
tempdbaudit - SQL Server tempdb Best-Practice Checker.

Inspects the tempdb configuration of one or more SQL Server instances and
reports deviations from the well-known tempdb best-practice rules.

Usage:
    # CLI (recommended)
    tempdbaudit check SQL01 --instance PROD

    # Programmatic
    from tempdbaudit.application.audit_service import TempdbAuditService

    service = TempdbAuditService()
    report = service.check_target(target)
"""

__version__ = "0.1.0"
__author__ = "tempdbaudit Team"

__all__ = ["__version__"]
