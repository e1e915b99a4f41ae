"""
Диагностика физичности матриц (без исключений)

В отличие от проверенных конструкторов, возвращает подробный отчёт
о каждом условии.
"""

import numpy as np
from typing import Dict
from numpy.typing import NDArray

from ..config import TOLERANCE


def check_physicality(density_matrix: NDArray[np.complex128],
                      tol: float = TOLERANCE) -> Dict[str, object]:
    """
    Проверка физичности матрицы плотности

    Требования:
    1. Эрмитова: ρ† = ρ
    2. Положительно полуопределённая: ρ ≥ 0
    3. Нормированная: Tr(ρ) = 1

    Args:
        density_matrix: Матрица плотности
        tol: Допустимая погрешность

    Returns:
        Словарь с результатами проверки
    """
    density_matrix = np.asarray(density_matrix, dtype=np.complex128)

    # 1. Эрмитовость
    hermitian_error = float(np.linalg.norm(density_matrix - density_matrix.conj().T))
    is_hermitian = hermitian_error < tol

    # 2. Положительная полуопределённость
    hermitian_part = (density_matrix + density_matrix.conj().T) / 2
    eigenvalues = np.linalg.eigvalsh(hermitian_part)
    min_eigenvalue = float(eigenvalues.min())
    is_positive = min_eigenvalue >= -tol

    # 3. Нормировка
    trace = float(np.trace(density_matrix).real)
    trace_error = abs(trace - 1.0)
    is_normalized = trace_error < tol

    # 4. Чистота (дополнительная информация)
    purity = float(np.trace(hermitian_part @ hermitian_part).real)
    is_pure = bool(np.isclose(purity, 1.0, atol=tol))

    return {
        "is_hermitian": is_hermitian,
        "hermitian_error": hermitian_error,
        "is_positive": is_positive,
        "min_eigenvalue": min_eigenvalue,
        "is_normalized": is_normalized,
        "trace": trace,
        "trace_error": trace_error,
        "is_physical": is_hermitian and is_positive and is_normalized,
        "purity": purity,
        "is_pure": is_pure
    }


def validate_measurement(operator: NDArray[np.complex128],
                         tol: float = TOLERANCE) -> Dict[str, object]:
    """
    Проверка условий 0 ⪯ T ⪯ I для оператора измерения

    Returns:
        Словарь с результатами проверки
    """
    operator = np.asarray(operator, dtype=np.complex128)

    hermitian_error = float(np.linalg.norm(operator - operator.conj().T))
    is_hermitian = hermitian_error < tol

    eigenvalues = np.linalg.eigvalsh((operator + operator.conj().T) / 2)
    min_eigenvalue = float(eigenvalues.min())
    max_eigenvalue = float(eigenvalues.max())

    return {
        "is_hermitian": is_hermitian,
        "hermitian_error": hermitian_error,
        "min_eigenvalue": min_eigenvalue,
        "max_eigenvalue": max_eigenvalue,
        "is_effect": is_hermitian and min_eigenvalue >= -tol and max_eigenvalue <= 1.0 + tol
    }
