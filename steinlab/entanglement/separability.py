"""
Проверка сепарабельности двудольных состояний

ρ на d₁×d₂ сепарабельно, если ρ = Σᵢ pᵢ ρᵢᴬ ⊗ ρᵢᴮ для некоторого конечного
ансамбля произведений. Общего эффективного алгоритма нет, поэтому
используется цепочка критериев, каждый из которых точен в своей области:

1. Чистые состояния: сепарабельно ⇔ ранг Шмидта = 1
2. Произведения: ρ = ρ_A ⊗ ρ_B (свидетель из одного слагаемого)
3. Диагональ в базисе |i⟩⊗|j⟩: свидетель Σ pᵢⱼ |i⟩⟨i| ⊗ |j⟩⟨j|
4. PPT (Перес): ρ^{T_B} ≱ 0 ⇒ запутано
5. Хородецкие: при d₁·d₂ ≤ 6 PPT ⇔ сепарабельно
6. Гурвиц–Барнум: Tr(ρ²) ≤ 1/(d - 1) ⇒ сепарабельно
7. Симметричное расширение (DPS, k = 2) через SDP: нет расширения ⇒ запутано
"""

import numpy as np
from typing import Optional

from ..config import TOLERANCE, DEFAULT_SOLVER
from ..core.exceptions import SeparabilityUndecided
from ..core.states import Ket, MixedState, dims_size
from ..core.tensor import (
    partial_transpose,
    schmidt_decomposition,
    split_dims,
    product,
    trace_left,
    trace_right
)
from ..core.spectral import is_pure, to_ket, purity
from ..ensembles.distribution import Distribution
from ..ensembles.ensemble import Ensemble


def _local_dims(rho: MixedState):
    left, right = split_dims(rho.dims)
    return dims_size(left), dims_size(right)


def _basis_state(dims, index: int) -> MixedState:
    """|i⟩⟨i| с сохранением структуры индексов подсистемы"""
    basis = MixedState.basis_state(dims_size(dims), index)
    return MixedState(basis.matrix, dims=dims, validate=False)


def is_product(rho: MixedState, tol: float = TOLERANCE) -> bool:
    """Проверка ρ = Tr_B(ρ) ⊗ Tr_A(ρ)"""
    return product(trace_right(rho), trace_left(rho)).allclose(rho, tol=tol)


def is_ppt(rho: MixedState, tol: float = TOLERANCE) -> bool:
    """
    Критерий Переса: положительность частично транспонированной матрицы

    Для сепарабельных состояний ρ^{T_B} ≥ 0.
    """
    dim_A, dim_B = _local_dims(rho)
    rho_pt = partial_transpose(rho.matrix, [dim_A, dim_B], 1)
    eigenvalues = np.linalg.eigvalsh((rho_pt + rho_pt.conj().T) / 2)
    return bool(eigenvalues.min() >= -tol)


def schmidt_rank(ket: Ket, dim_A: int, dim_B: int, tol: float = 1e-8) -> int:
    """Число ненулевых коэффициентов Шмидта"""
    coefficients, _, _ = schmidt_decomposition(ket.vector, dim_A, dim_B, tol=tol)
    return len(coefficients)


def _has_symmetric_extension(rho: MixedState, solver: Optional[str] = None) -> bool:
    """
    Существование PPT-симметричного расширения на A×B×B (иерархия DPS, k = 2)

    Ищем σ на A⊗B⊗B: σ ≥ 0, Tr_{B₂} σ = ρ, σ инвариантно относительно
    перестановки копий B, σ^{T_{B₂}} ≥ 0. Сепарабельные состояния такое
    расширение имеют всегда.
    """
    import cvxpy as cp

    dim_A, dim_B = _local_dims(rho)
    dim = dim_A * dim_B * dim_B

    # Перестановка B₁ ↔ B₂ на A⊗B⊗B
    i, j, k = np.indices((dim_A, dim_B, dim_B)).reshape(3, -1)
    swap_B = np.zeros((dim, dim))
    swap_B[i * dim_B * dim_B + k * dim_B + j, i * dim_B * dim_B + j * dim_B + k] = 1.0

    sigma = cp.Variable((dim, dim), hermitian=True)
    constraints = [
        sigma >> 0,
        cp.partial_trace(sigma, [dim_A * dim_B, dim_B], axis=1) == rho.matrix.copy(),
        swap_B @ sigma @ swap_B.T == sigma,
        cp.partial_transpose(sigma, [dim_A * dim_B, dim_B], axis=1) >> 0
    ]

    problem = cp.Problem(cp.Minimize(0), constraints)
    problem.solve(solver=solver or DEFAULT_SOLVER)

    return problem.status in (cp.OPTIMAL, cp.OPTIMAL_INACCURATE)


def is_separable(rho: MixedState, tol: float = TOLERANCE,
                 use_sdp: bool = True, solver: Optional[str] = None) -> bool:
    """
    Проверка сепарабельности состояния на d₁×d₂

    Args:
        rho: Состояние со структурой индексов (d₁, d₂)
        tol: Допустимая погрешность
        use_sdp: Использовать ли SDP-тест симметричного расширения (требует CVXPY)
        solver: Решатель CVXPY

    Returns:
        True, если состояние сепарабельно

    Raises:
        DimensionMismatch: состояние не является двудольным
        SeparabilityUndecided: ни один критерий не дал ответа
    """
    dim_A, dim_B = _local_dims(rho)

    # Тривиальная подсистема
    if dim_A == 1 or dim_B == 1:
        return True

    # 1. Чистые состояния: ранг Шмидта
    if is_pure(rho, tol=tol):
        return schmidt_rank(to_ket(rho, tol=tol), dim_A, dim_B) == 1

    # 2. Произведения
    if is_product(rho, tol=tol):
        return True

    # 3. Диагональ в базисе произведений
    if separable_decomposition(rho, tol=tol) is not None:
        return True

    # 4. Критерий Переса
    if not is_ppt(rho, tol=tol):
        return False

    # 5. Малые размерности: PPT достаточно
    if dim_A * dim_B <= 6:
        return True

    # 6. Шар вокруг максимально смешанного состояния
    if purity(rho) <= 1.0 / (dim_A * dim_B - 1) + tol:
        return True

    # 7. Симметричное расширение
    if use_sdp and not _has_symmetric_extension(rho, solver=solver):
        return False

    raise SeparabilityUndecided(
        f"Не удалось определить сепарабельность PPT-состояния размерности {dim_A}×{dim_B}"
    )


def separable_decomposition(rho: MixedState, tol: float = TOLERANCE) -> Optional[Ensemble]:
    """
    Явный свидетель сепарабельности: ансамбль произведений {pᵢ, ρᵢᴬ ⊗ ρᵢᴮ}

    Строится для:
    - произведений ρ_A ⊗ ρ_B (одно слагаемое)
    - чистых состояний с рангом Шмидта 1
    - состояний, диагональных в произведённом базисе Σ pᵢⱼ |i⟩⟨i| ⊗ |j⟩⟨j|

    Returns:
        Ensemble из MixedState со структурой (d₁, d₂) или None
    """
    left, right = split_dims(rho.dims)
    dim_A, dim_B = dims_size(left), dims_size(right)

    if is_product(rho, tol=tol):
        return Ensemble([product(trace_right(rho), trace_left(rho))], Distribution([1.0]))

    if is_pure(rho, tol=tol):
        ket = to_ket(rho, tol=tol)
        coefficients, basis_A, basis_B = schmidt_decomposition(ket.vector, dim_A, dim_B)
        if len(coefficients) != 1:
            return None
        a = Ket(basis_A[:, 0], normalize=True, dims=left)
        b = Ket(basis_B[:, 0].conj(), normalize=True, dims=right)
        return Ensemble([product(a.to_mixed_state(), b.to_mixed_state())], Distribution([1.0]))

    off_diagonal = rho.matrix - np.diag(np.diag(rho.matrix))
    if np.allclose(off_diagonal, 0.0, atol=tol):
        weights = np.clip(np.diag(rho.matrix).real, 0.0, None)
        members, probabilities = [], []
        for index in np.flatnonzero(weights > tol):
            i, j = divmod(int(index), dim_B)
            members.append(product(_basis_state(left, i), _basis_state(right, j)))
            probabilities.append(weights[index])
        probabilities = np.array(probabilities) / np.sum(probabilities)
        return Ensemble(members, Distribution(probabilities))

    return None
