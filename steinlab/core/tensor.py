"""
Модуль тензорных операций над состояниями

Композиция и декомпозиция: тензорное произведение, частичный след,
переиндексация базиса (relabel), SWAP и ассоциатор.

Порядок базиса - лексикографический (как у np.kron): индекс (i, j)
системы d₁×d₂ имеет номер i·d₂ + j.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple, Union
from numpy.typing import NDArray

from .exceptions import DimensionMismatch
from .states import MixedState, Dims, dims_size


def tensor_product(*matrices: NDArray[np.complex128]) -> NDArray[np.complex128]:
    """
    Тензорное произведение матриц: A ⊗ B ⊗ C ⊗ ...

    Для векторов состояния:
    |ψ₁⟩ ⊗ |ψ₂⟩ = |ψ₁ψ₂⟩

    Args:
        matrices: Матрицы или векторы для тензорного произведения

    Returns:
        Результат тензорного произведения
    """
    if len(matrices) == 0:
        raise ValueError("Нужна хотя бы одна матрица")

    result = matrices[0]
    for matrix in matrices[1:]:
        result = np.kron(result, matrix)

    return result


def partial_trace(rho: NDArray[np.complex128],
                  dims: List[int],
                  trace_out: Union[int, List[int]]) -> NDArray[np.complex128]:
    """
    Частичный след (partial trace) матрицы на системе d₁×...×dₙ

    Для системы AB: Tr_B(ρ_AB) = ρ_A

    Args:
        rho: Матрица
        dims: Размерности подсистем [d₁, d₂, ..., dₙ]
        trace_out: Индекс(ы) подсистемы для вычисления следа (0-based)

    Returns:
        Матрица редуцированной системы

    Example:
        # trace_out=1 даёт редуцированное состояние первой подсистемы
        rho_A = partial_trace(rho_AB, [2, 3], 1)
    """
    if isinstance(trace_out, (int, np.integer)):
        trace_out = [trace_out]

    dims = [int(d) for d in dims]
    n_subsystems = len(dims)
    total_dim = int(np.prod(dims))

    if rho.shape != (total_dim, total_dim):
        raise DimensionMismatch(f"Размерность матрицы {rho.shape} не соответствует dims={dims}")

    for idx in trace_out:
        if idx < 0 or idx >= n_subsystems:
            raise DimensionMismatch(f"Индекс {idx} вне диапазона [0, {n_subsystems-1}]")

    keep_indices = [i for i in range(n_subsystems) if i not in trace_out]

    if len(keep_indices) == 0:
        return np.array([[np.trace(rho)]], dtype=np.complex128)

    keep_dims = [dims[i] for i in keep_indices]
    reduced_dim = int(np.prod(keep_dims))

    # rho: (d₁...dₙ, d₁...dₙ) -> (d₁, ..., dₙ, d₁, ..., dₙ)
    rho_tensor = rho.reshape(dims + dims)

    # След по каждой выбрасываемой подсистеме, начиная с последней
    for idx in sorted(set(trace_out), reverse=True):
        rho_tensor = np.trace(rho_tensor, axis1=idx, axis2=idx + n_subsystems)
        n_subsystems -= 1

    return rho_tensor.reshape(reduced_dim, reduced_dim)


def partial_transpose(rho: NDArray[np.complex128],
                      dims: List[int],
                      transpose: Union[int, List[int]]) -> NDArray[np.complex128]:
    """
    Частичное транспонирование (partial transpose)
    Используется для проверки запутанности (PPT criterion)

    Args:
        rho: Матрица
        dims: Размерности подсистем
        transpose: Индекс(ы) подсистемы для транспонирования

    Returns:
        Частично транспонированная матрица
    """
    if isinstance(transpose, (int, np.integer)):
        transpose = [transpose]

    dims = [int(d) for d in dims]
    n_subsystems = len(dims)
    total_dim = int(np.prod(dims))

    if rho.shape != (total_dim, total_dim):
        raise DimensionMismatch(f"Размерность матрицы {rho.shape} не соответствует dims={dims}")

    rho_tensor = rho.reshape(dims + dims)

    axes = list(range(2 * n_subsystems))
    for idx in transpose:
        if idx < 0 or idx >= n_subsystems:
            raise DimensionMismatch(f"Индекс {idx} вне диапазона")
        axes[idx], axes[idx + n_subsystems] = axes[idx + n_subsystems], axes[idx]

    return np.transpose(rho_tensor, axes).reshape(total_dim, total_dim)


def schmidt_decomposition(state_vector: NDArray[np.complex128],
                          dim_A: int,
                          dim_B: int,
                          tol: float = 1e-12) -> Tuple[NDArray[np.float64],
                                                       NDArray[np.complex128],
                                                       NDArray[np.complex128]]:
    """
    Разложение Шмидта для чистого состояния |ψ⟩_AB

    |ψ⟩ = Σᵢ sᵢ |aᵢ⟩|bᵢ⟩

    Args:
        state_vector: Вектор состояния системы AB
        dim_A: Размерность подсистемы A
        dim_B: Размерность подсистемы B
        tol: Порог отбрасывания нулевых коэффициентов

    Returns:
        (schmidt_coefficients, basis_A, basis_B)
    """
    if len(state_vector) != dim_A * dim_B:
        raise DimensionMismatch(f"Размерность вектора {len(state_vector)} != {dim_A}×{dim_B}")

    psi_matrix = np.asarray(state_vector).reshape(dim_A, dim_B)

    # SVD разложение: ψ = U Σ V†
    U, sigma, Vh = np.linalg.svd(psi_matrix, full_matrices=False)

    schmidt_coefficients = sigma[sigma > tol]
    rank = len(schmidt_coefficients)

    return schmidt_coefficients, U[:, :rank], Vh.conj().T[:, :rank]


def check_permutation(perm: Sequence[int], n: int) -> NDArray[np.intp]:
    """Проверка, что perm - биекция {0..n-1} → {0..n-1}"""
    perm = np.asarray(perm, dtype=np.intp)
    if perm.shape != (n,):
        raise DimensionMismatch(f"Перестановка длины {perm.size} для множества из {n} элементов")
    if not np.array_equal(np.sort(perm), np.arange(n)):
        raise ValueError("Отображение не является биекцией")
    return perm


def split_dims(dims: Dims) -> Tuple[Dims, Dims]:
    """Разбор структуры d₁×d₂ на (d₁, d₂)"""
    if not (isinstance(dims, tuple) and len(dims) == 2):
        raise DimensionMismatch(f"Ожидалась составная система (d₁, d₂), получено {dims!r}")
    return dims[0], dims[1]


def product(rho1: MixedState, rho2: MixedState) -> MixedState:
    """
    Тензорное произведение состояний: ρ₁ ⊗ ρ₂

    Tr(ρ₁ ⊗ ρ₂) = Tr(ρ₁)·Tr(ρ₂) = 1, положительность сохраняется.
    """
    matrix = tensor_product(rho1.matrix, rho2.matrix)
    return MixedState(matrix, dims=(rho1.dims, rho2.dims), validate=False)


def trace_left(rho: MixedState) -> MixedState:
    """
    След по первой подсистеме: ρ_AB → ρ_B

    result[i, j] = Σₖ ρ[(k, i), (k, j)]
    """
    left, right = split_dims(rho.dims)
    reduced = partial_trace(rho.matrix, [dims_size(left), dims_size(right)], 0)
    return MixedState(reduced, dims=right, validate=False)


def trace_right(rho: MixedState) -> MixedState:
    """
    След по второй подсистеме: ρ_AB → ρ_A

    result[i, j] = Σₖ ρ[(i, k), (j, k)]
    """
    left, right = split_dims(rho.dims)
    reduced = partial_trace(rho.matrix, [dims_size(left), dims_size(right)], 1)
    return MixedState(reduced, dims=left, validate=False)


def relabel(rho: MixedState, perm: Sequence[int],
            dims: Optional[Dims] = None) -> MixedState:
    """
    Переиндексация базиса биекцией: result[i, j] = ρ[perm[i], perm[j]]

    Эквивалентно сопряжению матрицей перестановки P ρ P†, поэтому
    эрмитовость, положительность и след сохраняются точно.

    Args:
        rho: Состояние
        perm: Биекция новых индексов в старые
        dims: Новая структура индексов (по умолчанию - прежняя)
    """
    perm = check_permutation(perm, rho.dim)
    new_dims = rho.dims if dims is None else dims
    if dims_size(new_dims) != rho.dim:
        raise DimensionMismatch(f"Структура {new_dims!r} не согласована с размерностью {rho.dim}")
    matrix = rho.matrix[np.ix_(perm, perm)]
    return MixedState(matrix, dims=new_dims, validate=False)


def swap_permutation(dim_A: int, dim_B: int) -> NDArray[np.intp]:
    """Биекция (j, i) ∈ B×A → (i, j) ∈ A×B"""
    return np.arange(dim_A * dim_B).reshape(dim_A, dim_B).T.reshape(-1)


def swap(rho: MixedState) -> MixedState:
    """
    SWAP: ρ_AB → ρ_BA

    Чистая переиндексация базиса (не физический гейт); инволюция.
    """
    left, right = split_dims(rho.dims)
    perm = swap_permutation(dims_size(left), dims_size(right))
    return relabel(rho, perm, dims=(right, left))


def assoc_permutation(dim_A: int, dim_B: int, dim_C: int) -> NDArray[np.intp]:
    """
    Биекция a×(b×c) → (a×b)×c

    Новый индекс (i, (j, k)) = i·bc + j·c + k, старый ((i, j), k) = (i·b + j)·c + k.
    """
    i, j, k = np.indices((dim_A, dim_B, dim_C)).reshape(3, -1)
    new_index = i * (dim_B * dim_C) + j * dim_C + k
    old_index = (i * dim_B + j) * dim_C + k
    perm = np.empty(dim_A * dim_B * dim_C, dtype=np.intp)
    perm[new_index] = old_index
    return perm


def assoc(rho: MixedState) -> MixedState:
    """Перестановка скобок: (A×B)×C → A×(B×C)"""
    left, c = split_dims(rho.dims)
    a, b = split_dims(left)
    perm = assoc_permutation(dims_size(a), dims_size(b), dims_size(c))
    return relabel(rho, perm, dims=(a, (b, c)))


def assoc_inv(rho: MixedState) -> MixedState:
    """Обратная перестановка скобок: A×(B×C) → (A×B)×C"""
    a, right = split_dims(rho.dims)
    b, c = split_dims(right)
    perm = assoc_permutation(dims_size(a), dims_size(b), dims_size(c))
    inverse = np.argsort(perm)
    return relabel(rho, inverse, dims=((a, b), c))
