"""
Org Chart Routes
================

API route handlers for the Org Chart Service.

Routes:
- charts: Stateless layout, transform and export
- builder: Interactive builder sessions
"""

from services.org_chart.routes import builder, charts


__all__ = ["builder", "charts"]
