"""
Метрики различимости квантовых состояний
"""

import numpy as np

from ..config import TOLERANCE
from ..core.exceptions import DimensionMismatch
from ..core.states import MixedState


def _check_same_dim(rho1: MixedState, rho2: MixedState):
    if rho1.dim != rho2.dim:
        raise DimensionMismatch(f"Размерности {rho1.dim} и {rho2.dim} не совпадают")


def _matrix_sqrt(matrix: np.ndarray) -> np.ndarray:
    """Квадратный корень из PSD матрицы через диагонализацию"""
    eigenvalues, eigenvectors = np.linalg.eigh(matrix)
    eigenvalues = np.maximum(eigenvalues, 0)  # Численная стабильность
    return eigenvectors @ np.diag(np.sqrt(eigenvalues)) @ eigenvectors.conj().T


def trace_distance(rho1: MixedState, rho2: MixedState) -> float:
    """
    Trace distance: D(ρ₁, ρ₂) = ½ Tr|ρ₁ - ρ₂| ∈ [0, 1]
    """
    _check_same_dim(rho1, rho2)
    eigenvalues = np.linalg.eigvalsh(rho1.matrix - rho2.matrix)
    return float(np.clip(0.5 * np.sum(np.abs(eigenvalues)), 0.0, 1.0))


def fidelity(rho1: MixedState, rho2: MixedState) -> float:
    """
    Fidelity: F(ρ₁, ρ₂) = (Tr√(√ρ₁ ρ₂ √ρ₁))²

    Для чистых состояний: F = |⟨ψ₁|ψ₂⟩|²
    """
    _check_same_dim(rho1, rho2)
    sqrt_rho1 = _matrix_sqrt(rho1.matrix)
    M = sqrt_rho1 @ rho2.matrix @ sqrt_rho1
    value = np.trace(_matrix_sqrt((M + M.conj().T) / 2)).real ** 2
    return float(np.clip(value, 0.0, 1.0))


def helstrom_error(rho1: MixedState, rho2: MixedState, prior: float = 0.5) -> float:
    """
    Минимальная средняя ошибка различения двух состояний (Хелстром)

    P_err = ½ (1 - ||p ρ₁ - (1 - p) ρ₂||₁)

    Args:
        prior: Априорная вероятность ρ₁
    """
    _check_same_dim(rho1, rho2)
    if not 0.0 <= prior <= 1.0:
        raise ValueError(f"Априорная вероятность должна лежать в [0, 1], получено {prior}")
    eigenvalues = np.linalg.eigvalsh(prior * rho1.matrix - (1 - prior) * rho2.matrix)
    return float(np.clip(0.5 * (1.0 - np.sum(np.abs(eigenvalues))), 0.0, 1.0))


def relative_entropy(rho: MixedState, sigma: MixedState,
                     base: float = np.e, tol: float = TOLERANCE) -> float:
    """
    Квантовая относительная энтропия D(ρ‖σ) = Tr[ρ (log ρ - log σ)]

    = +∞, если носитель ρ не содержится в носителе σ.
    По квантовой лемме Штейна -log β_ε(ρ^{⊗n}‖{σ^{⊗n}}) / n → D(ρ‖σ).
    """
    _check_same_dim(rho, sigma)

    w_rho, U_rho = np.linalg.eigh(rho.matrix)
    w_sigma, U_sigma = np.linalg.eigh(sigma.matrix)

    # |⟨uᵢ|vⱼ⟩|² - переходные вероятности между собственными базисами
    overlaps = np.abs(U_rho.conj().T @ U_sigma) ** 2

    rho_support = w_rho > tol
    sigma_support = w_sigma > tol

    # Вклад ρ вне носителя σ
    leakage = np.sum(w_rho[rho_support][:, np.newaxis] * overlaps[np.ix_(rho_support, ~sigma_support)])
    if leakage > tol:
        return float('inf')

    p = w_rho[rho_support]
    entropy_term = np.sum(p * np.log(p))
    cross_term = np.sum(p[:, np.newaxis] * overlaps[np.ix_(rho_support, sigma_support)]
                        * np.log(w_sigma[sigma_support])[np.newaxis, :])

    return float(max(entropy_term - cross_term, 0.0) / np.log(base))
