"""Ядро: состояния, тензорная алгебра, спектральный анализ, очищение"""
from .exceptions import (
    InvalidState,
    DimensionMismatch,
    InvalidDistribution,
    InvalidMeasurement,
    SeparabilityUndecided
)
from .states import Ket, MixedState, dims_size
from .tensor import (
    tensor_product,
    partial_trace,
    partial_transpose,
    product,
    trace_left,
    trace_right,
    relabel,
    swap,
    assoc,
    assoc_inv
)
from .spectral import spectrum, purity, is_pure, eigendecomposition, von_neumann_entropy
from .purification import purify
from .measurements import MeasurementOperator

__all__ = [
    'InvalidState',
    'DimensionMismatch',
    'InvalidDistribution',
    'InvalidMeasurement',
    'SeparabilityUndecided',
    'Ket',
    'MixedState',
    'dims_size',
    'tensor_product',
    'partial_trace',
    'partial_transpose',
    'product',
    'trace_left',
    'trace_right',
    'relabel',
    'swap',
    'assoc',
    'assoc_inv',
    'spectrum',
    'purity',
    'is_pure',
    'eigendecomposition',
    'von_neumann_entropy',
    'purify',
    'MeasurementOperator'
]
