"""Deterministic receipt points engine."""

from src.scoring.engine import RuleEngine, compute_points

__all__ = ["RuleEngine", "compute_points"]
