"""
Очищение (purification) смешанного состояния

Для ρ = Σⱼ λⱼ |vⱼ⟩⟨vⱼ| строится |Ψ⟩ = Σᵢⱼ √λⱼ vⱼ(i) |i⟩|j⟩ размерности d²,
такой что Tr₂ |Ψ⟩⟨Ψ| = ρ.
"""

import numpy as np

from .states import Ket, MixedState
from .spectral import eigendecomposition


def purify(rho: MixedState) -> Ket:
    """
    Очищение ρ во вспомогательную систему той же размерности

    Амплитуда в индексе (i, j) равна √λⱼ · vⱼ(i). Нормировка:
    Σᵢⱼ |amp|² = Σⱼ λⱼ Σᵢ |vⱼ(i)|² = Σⱼ λⱼ = 1.

    Вырожденный спектр и нулевые собственные значения допустимы:
    Σⱼ λⱼ |vⱼ⟩⟨vⱼ| = ρ для любого ортонормированного собственного базиса.

    Returns:
        Ket со структурой индексов (ρ.dims, d)
    """
    eigenvalues, eigenvectors = eigendecomposition(rho)
    # Отрицательные собственные значения порядка погрешности обнуляются
    clipped = np.clip(eigenvalues, 0.0, None)
    weights = np.sqrt(clipped / clipped.sum())

    # amplitudes[i, j] = √λⱼ · vⱼ(i)
    amplitudes = eigenvectors * weights[np.newaxis, :]

    return Ket(amplitudes.reshape(-1), normalize=False, dims=(rho.dims, rho.dim))


def purification_state(rho: MixedState) -> MixedState:
    """Чистое состояние |Ψ⟩⟨Ψ| на системе d×d"""
    return MixedState.pure(purify(rho))
