"""Метрики различимости и диагностика физичности"""
from .distance import (
    trace_distance,
    fidelity,
    helstrom_error,
    relative_entropy
)
from .validation import (
    check_physicality,
    validate_measurement
)

__all__ = [
    'trace_distance',
    'fidelity',
    'helstrom_error',
    'relative_entropy',
    'check_physicality',
    'validate_measurement'
]
