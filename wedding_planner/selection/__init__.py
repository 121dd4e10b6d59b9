"""Bulk selection mode."""

from wedding_planner.selection.controller import SelectionController

__all__ = ["SelectionController"]
