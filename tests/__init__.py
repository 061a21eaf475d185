"""
Org Chart Test Suite
====================

Test organization:
- tests/unit/                 - Shared library tests (config, logging, models)
- tests/services/org_chart/   - Layout, graph, builder, export and API tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest -m "not integration"     # Skip HTTP service tests
"""
