"""
Спектральный анализ состояний: спектр, чистота, проверка чистоты

Собственные векторы при вырожденном спектре определены неоднозначно;
устойчивы только агрегированные величины (спектр как мультимножество,
чистота, энтропия).
"""

import numpy as np
from typing import Tuple
from numpy.typing import NDArray

from ..config import TOLERANCE
from .states import Ket, MixedState


def eigendecomposition(rho: MixedState) -> Tuple[NDArray[np.float64], NDArray[np.complex128]]:
    """
    Разложение ρ = Σⱼ λⱼ |vⱼ⟩⟨vⱼ|

    Returns:
        (eigenvalues, eigenvectors) - собственные значения по возрастанию
        и собственные векторы в столбцах
    """
    eigenvalues, eigenvectors = np.linalg.eigh(rho.matrix)
    return eigenvalues, eigenvectors


def spectrum(rho: MixedState):
    """
    Спектр состояния как распределение вероятностей

    Собственные значения неотрицательны и суммируются в 1 (следствие
    PSD и Tr ρ = 1); отрицательные нули округления отсекаются.
    """
    from ..ensembles.distribution import Distribution

    eigenvalues = np.clip(np.linalg.eigvalsh(rho.matrix), 0.0, None)
    eigenvalues = eigenvalues / eigenvalues.sum()
    return Distribution(eigenvalues, validate=False)


def purity(rho: MixedState) -> float:
    """
    Чистота Tr(ρ²) ∈ [1/d, 1]

    = 1 только для чистых состояний, = 1/n для I/n.
    """
    value = np.trace(rho.matrix @ rho.matrix).real
    return float(np.clip(value, 0.0, 1.0))


def is_pure(rho: MixedState, tol: float = TOLERANCE) -> bool:
    """
    Проверка чистоты: Tr(ρ²) = 1 ⇔ спектр сосредоточен в одной точке
    ⇔ ρ = |ψ⟩⟨ψ| для некоторого ψ
    """
    return bool(np.isclose(purity(rho), 1.0, atol=tol, rtol=0.0))


def to_ket(rho: MixedState, tol: float = TOLERANCE) -> Ket:
    """
    Вектор ψ с ρ = |ψ⟩⟨ψ| (определён с точностью до фазы)

    Raises:
        ValueError: состояние не чистое
    """
    if not is_pure(rho, tol=tol):
        raise ValueError(f"Состояние не чистое: Tr(ρ²) = {purity(rho):.6f}")
    _, eigenvectors = eigendecomposition(rho)
    return Ket(eigenvectors[:, -1], normalize=True, dims=rho.dims)


def rank(rho: MixedState, tol: float = TOLERANCE) -> int:
    """Число ненулевых собственных значений"""
    return int(np.sum(np.linalg.eigvalsh(rho.matrix) > tol))


def von_neumann_entropy(rho: MixedState, base: float = 2.0) -> float:
    """
    Энтропия фон Неймана S(ρ) = -Tr(ρ log ρ) = H(spectrum(ρ))

    S = 0 для чистых состояний, S = log n для I/n
    """
    return spectrum(rho).entropy(base=base)
