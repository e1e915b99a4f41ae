"""Распределения вероятностей и ансамбли состояний"""
from .distribution import Distribution
from .ensemble import (
    Ensemble,
    convex_combination,
    mix,
    average,
    trivial_ensemble,
    spectral_ensemble,
    mixes_to_pure
)

__all__ = [
    'Distribution',
    'Ensemble',
    'convex_combination',
    'mix',
    'average',
    'trivial_ensemble',
    'spectral_ensemble',
    'mixes_to_pure'
]
