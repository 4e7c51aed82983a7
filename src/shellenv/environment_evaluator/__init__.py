"""
Environment evaluation.

This package handles:
1. Validating an environment spec before any resolution
2. Resolving each dependency in fold order
3. Folding the resolved artifacts into an environment descriptor
"""

from .evaluator import EnvironmentEvaluator, evaluate

__all__ = ["EnvironmentEvaluator", "evaluate"]
