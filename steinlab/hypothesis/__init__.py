"""Оптимальная проверка гипотез и показатели Штейна"""
from .rate import (
    HypothesisTestResult,
    solve_hypothesis_test,
    optimal_hypothesis_rate,
    neyman_pearson_rate,
    singleton_decomposition_rate
)
from .resource import ResourceTheory, ProductResourceTheory, tensor_power
from .stein import SteinSequence, rate_sequence

__all__ = [
    'HypothesisTestResult',
    'solve_hypothesis_test',
    'optimal_hypothesis_rate',
    'neyman_pearson_rate',
    'singleton_decomposition_rate',
    'ResourceTheory',
    'ProductResourceTheory',
    'tensor_power',
    'SteinSequence',
    'rate_sequence'
]
