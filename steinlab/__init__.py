"""
SteinLab++ - Алгебра квантовых состояний и оптимальная проверка гипотез
Конечномерные матрицы плотности, тензорная алгебра, ансамбли и SDP-оптимизатор
"""

__version__ = "1.0.0"
__author__ = "SteinLab++ Team"

from .core.states import Ket, MixedState
from .core.measurements import MeasurementOperator
from .ensembles.distribution import Distribution
from .ensembles.ensemble import Ensemble
from .hypothesis.rate import optimal_hypothesis_rate

__all__ = [
    'Ket',
    'MixedState',
    'MeasurementOperator',
    'Distribution',
    'Ensemble',
    'optimal_hypothesis_rate'
]
