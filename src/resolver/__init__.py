"""Dependency resolution."""

from .concurrent import ConcurrentDependencyResolver
from .resolver import DependencyResolver, Resolution, parse_constraint

__all__ = [
    "ConcurrentDependencyResolver",
    "DependencyResolver",
    "Resolution",
    "parse_constraint",
]
