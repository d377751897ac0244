"""Baseline policies and match evaluation."""

from .match import (
    EvaluationResult,
    Policy,
    RandomPolicy,
    SurvivalPolicy,
    distance_to_edge,
    evaluate_policies,
)

__all__ = [
    "EvaluationResult",
    "Policy",
    "RandomPolicy",
    "SurvivalPolicy",
    "distance_to_edge",
    "evaluate_policies",
]
