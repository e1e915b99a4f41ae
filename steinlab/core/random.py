"""
Генерация случайных состояний
Полезно для проверки алгебраических тождеств на «типичных» входах
"""

import numpy as np
from typing import Optional
from numpy.typing import NDArray

from .states import Ket, MixedState


def random_unitary(dim: int, seed: Optional[int] = None) -> NDArray[np.complex128]:
    """
    Генерация случайной унитарной матрицы по мере Хаара

    Использует QR-разложение случайной комплексной матрицы
    с нормировкой фазы

    Args:
        dim: Размерность
        seed: Random seed для воспроизводимости

    Returns:
        Случайная унитарная матрица dim×dim
    """
    rng = np.random.default_rng(seed)

    A = rng.standard_normal((dim, dim)) + 1j * rng.standard_normal((dim, dim))

    Q, R = np.linalg.qr(A)

    # Нормировка фазы (диагональ R может быть отрицательной)
    Lambda = np.diag(np.diag(R) / np.abs(np.diag(R)))
    return (Q @ Lambda).astype(np.complex128)


def random_ket(dim: int, seed: Optional[int] = None) -> Ket:
    """Случайное чистое состояние (первый столбец унитарной матрицы Хаара)"""
    return Ket(random_unitary(dim, seed=seed)[:, 0], normalize=True)


def random_mixed_state(dim: int, rank: Optional[int] = None,
                       seed: Optional[int] = None) -> MixedState:
    """
    Генерация случайной матрицы плотности

    ρ = G G† / Tr(G G†), G - комплексная гауссова матрица dim×rank
    (мера Хильберта–Шмидта при rank = dim)

    Args:
        dim: Размерность
        rank: Ранг матрицы (None = полный ранг)
        seed: Random seed
    """
    rng = np.random.default_rng(seed)

    if rank is None:
        rank = dim
    if not 1 <= rank <= dim:
        raise ValueError(f"Ранг {rank} вне диапазона [1, {dim}]")

    G = rng.standard_normal((dim, rank)) + 1j * rng.standard_normal((dim, rank))
    rho = G @ G.conj().T
    rho = rho / np.trace(rho).real

    return MixedState.from_matrix(rho)
