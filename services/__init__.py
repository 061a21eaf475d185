"""
Services
========

- org_chart: Organizational hierarchy graph engine (port 8006)
"""
