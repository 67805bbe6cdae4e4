"""Project evaluators.

``ProjectEvaluator`` is the contract the resolvers depend on;
``DotnetEvaluator`` implements it on top of ``dotnet msbuild``.
"""

from .base import EvaluatedItem, EvaluationResult, ProjectEvaluator, ProjectHandle
from .dotnet import DotnetEvaluator

__all__ = [
    "ProjectEvaluator",
    "ProjectHandle",
    "EvaluatedItem",
    "EvaluationResult",
    "DotnetEvaluator",
]
