"""
Wedding Planner - Source Package

A small planning assistant for a couple preparing a wedding.
It keeps two local lists: the people to invite and the expenses.

DESIGN PRINCIPLES:
1. Every list lives in exactly one storage slot
2. Every mutation rewrites the whole slot
3. Nothing loaded from disk is trusted without validation
4. Failures degrade to a message or a log line, never a crash
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Wedding Planner Team"
