"""
ReleaseWatch - Release-notes monitor for vendor security tools

This package provides:
- Vendor extractors for Veracode and SD Elements release notes
- Reconciliation of extracted notes against stored records
- SQLite or PostgreSQL persistence
- Console run reports and a read-only FastAPI server
"""

__version__ = "1.0.0"
