"""Utility helpers for apiPerfBudget."""
