"""Запутанность и сепарабельность двудольных состояний"""
from .separability import (
    is_separable,
    is_product,
    is_ppt,
    schmidt_rank,
    separable_decomposition
)

__all__ = [
    'is_separable',
    'is_product',
    'is_ppt',
    'schmidt_rank',
    'separable_decomposition'
]
