"""
Org Chart Service
=================

Organizational hierarchy graph engine.

Features:
- Organization records -> positioned node/edge chart
- Level-based grid layout and manual re-layout
- Interactive chart building (palette drops, connections, drag-end commits)
- JSON and PNG export

Port: 8006
"""

__version__ = "0.1.0"
