"""
Модуль квантовых состояний
Нормированные векторы (Ket) и матрицы плотности (MixedState) с проверкой
физических условий на границе конструирования
"""

import numpy as np
from typing import Optional, Sequence, Tuple, Union
from numpy.typing import NDArray

from ..config import TOLERANCE
from .exceptions import InvalidState, DimensionMismatch

# Структура индексов: int (элементарная система) или пара (left, right)
Dims = Union[int, Tuple['Dims', 'Dims']]


def dims_size(dims: Dims) -> int:
    """Полная размерность для структуры индексов: ((2, 3), 2) → 12"""
    if isinstance(dims, (int, np.integer)):
        if dims < 1:
            raise DimensionMismatch(f"Размерность должна быть ≥ 1, получено {dims}")
        return int(dims)
    if isinstance(dims, tuple) and len(dims) == 2:
        return dims_size(dims[0]) * dims_size(dims[1])
    raise DimensionMismatch(f"Некорректная структура индексов: {dims!r}")


def _resolve_dims(dims: Optional[Dims], dim: int) -> Dims:
    """Проверка согласованности структуры индексов с размером матрицы"""
    if dims is None:
        return dim
    if dims_size(dims) != dim:
        raise DimensionMismatch(f"Структура {dims!r} задаёт размерность {dims_size(dims)}, "
                                f"а матрица имеет размерность {dim}")
    return dims


class Ket:
    """
    Нормированный вектор состояния (чистое состояние)
    |ψ⟩ = Σᵢ αᵢ|i⟩, где Σᵢ|αᵢ|² = 1
    """

    def __init__(self, vector: Union[NDArray[np.complex128], Sequence[complex]],
                 normalize: bool = True,
                 dims: Optional[Dims] = None,
                 tol: float = TOLERANCE):
        """
        Args:
            vector: Комплексный вектор состояния
            normalize: Нормализовать ли вектор автоматически
            dims: Структура индексов (по умолчанию - одна система размерности len(vector))
            tol: Допустимая погрешность нормировки
        """
        array = np.array(vector, dtype=np.complex128).reshape(-1)

        if array.size == 0:
            raise InvalidState("Вектор состояния не может быть пустым")

        norm = np.linalg.norm(array)
        if normalize:
            if norm < 1e-15:
                raise InvalidState("Нулевой вектор не может быть нормализован")
            array = array / norm
        elif not np.isclose(norm, 1.0, atol=tol, rtol=0.0):
            raise InvalidState(f"Вектор состояния не нормирован: ||ψ|| = {norm}")

        array.setflags(write=False)
        self._vector = array
        self._dims = _resolve_dims(dims, array.size)

    @property
    def vector(self) -> NDArray[np.complex128]:
        return self._vector

    @property
    def dims(self) -> Dims:
        return self._dims

    @property
    def dim(self) -> int:
        return self._vector.size

    def to_mixed_state(self) -> 'MixedState':
        """Преобразование в матрицу плотности: ρ = |ψ⟩⟨ψ|"""
        return MixedState.pure(self)

    def probability(self, basis_state: int) -> float:
        """P(i) = |⟨i|ψ⟩|²"""
        if not 0 <= basis_state < self.dim:
            raise ValueError(f"Базисное состояние {basis_state} вне диапазона")
        return float(np.abs(self._vector[basis_state]) ** 2)

    def inner(self, other: 'Ket') -> complex:
        """Скалярное произведение ⟨self|other⟩"""
        if self.dim != other.dim:
            raise DimensionMismatch(f"Размерности {self.dim} и {other.dim} не совпадают")
        return complex(np.vdot(self._vector, other._vector))

    def expectation_value(self, operator: NDArray[np.complex128]) -> complex:
        """⟨ψ|Ô|ψ⟩"""
        return complex(np.vdot(self._vector, operator @ self._vector))

    def product(self, other: 'Ket') -> 'Ket':
        """|ψ⟩ ⊗ |φ⟩"""
        return Ket(np.kron(self._vector, other._vector), normalize=False,
                   dims=(self._dims, other._dims))

    def equals_up_to_phase(self, other: 'Ket', tol: float = TOLERANCE) -> bool:
        """Проверка |⟨ψ|φ⟩| = 1 (совпадение с точностью до глобальной фазы)"""
        return bool(np.isclose(abs(self.inner(other)), 1.0, atol=tol, rtol=0.0))

    def __repr__(self) -> str:
        return f"Ket(dim={self.dim}, dims={self._dims!r})"

    def __str__(self) -> str:
        terms = []
        for i, amp in enumerate(self._vector):
            if np.abs(amp) > 1e-10:
                real, imag = amp.real, amp.imag
                if np.abs(imag) < 1e-10:
                    terms.append(f"{real:.4f}|{i}⟩")
                elif np.abs(real) < 1e-10:
                    terms.append(f"{imag:.4f}i|{i}⟩")
                else:
                    terms.append(f"({real:.4f}{imag:+.4f}i)|{i}⟩")
        return " + ".join(terms) if terms else "0"

    @classmethod
    def basis(cls, dim: int, index: int) -> 'Ket':
        """Базисное состояние |i⟩"""
        if not 0 <= index < dim:
            raise ValueError(f"Индекс {index} вне диапазона для размерности {dim}")
        vector = np.zeros(dim, dtype=np.complex128)
        vector[index] = 1.0
        return cls(vector, normalize=False)


class MixedState:
    """
    Матрица плотности: чистые и смешанные состояния

    Инварианты (выполняются для каждого созданного значения):
    - ρ† = ρ (эрмитова)
    - ρ ≥ 0 (положительно полуопределённая)
    - Tr(ρ) = 1 (нормировка)

    Значения неизменяемы: каждая операция возвращает новое состояние.
    Внешние данные проходят проверку (from_matrix); внутренние операции,
    сохраняющие инварианты по построению, передают validate=False.
    """

    def __init__(self, matrix: NDArray[np.complex128],
                 dims: Optional[Dims] = None,
                 validate: bool = True,
                 tol: float = TOLERANCE):
        """
        Args:
            matrix: Матрица плотности
            dims: Структура индексов (int или вложенная пара)
            validate: Проверять ли физические условия
            tol: Допустимая погрешность
        """
        array = np.array(matrix, dtype=np.complex128)

        if array.ndim != 2:
            raise InvalidState("Матрица плотности должна быть двумерной")

        if array.shape[0] != array.shape[1]:
            raise InvalidState("Матрица плотности должна быть квадратной")

        if array.shape[0] == 0:
            raise InvalidState("Матрица плотности не может быть пустой")

        self._dims = _resolve_dims(dims, array.shape[0])

        if validate:
            self._validate(array, tol)
            # Симметризация убирает погрешность порядка tol
            array = (array + array.conj().T) / 2

        array.setflags(write=False)
        self._matrix = array

    @staticmethod
    def _validate(matrix: NDArray[np.complex128], tol: float):
        """Проверка физических условий"""
        if not np.all(np.isfinite(matrix)):
            raise InvalidState("Матрица плотности содержит нечисловые элементы")

        # Проверка эрмитовости
        if not np.allclose(matrix, matrix.conj().T, atol=tol, rtol=0.0):
            raise InvalidState("Матрица плотности не является эрмитовой")

        # Проверка нормировки
        trace = np.trace(matrix)
        if not np.isclose(trace, 1.0, atol=tol, rtol=0.0):
            raise InvalidState(f"След матрицы плотности не равен 1: Tr(ρ) = {trace}")

        # Проверка положительной полуопределённости
        eigenvalues = np.linalg.eigvalsh((matrix + matrix.conj().T) / 2)
        if np.any(eigenvalues < -tol):
            raise InvalidState(f"Матрица плотности не положительно полуопределённая: "
                               f"min eigenvalue = {eigenvalues.min()}")

    @property
    def matrix(self) -> NDArray[np.complex128]:
        """Матрица ρ (только чтение)"""
        return self._matrix

    @property
    def dims(self) -> Dims:
        return self._dims

    @property
    def dim(self) -> int:
        return self._matrix.shape[0]

    def purity(self) -> float:
        """Чистота состояния: Tr(ρ²) ∈ [1/d, 1]"""
        from .spectral import purity
        return purity(self)

    def is_pure(self, tol: float = TOLERANCE) -> bool:
        from .spectral import is_pure
        return is_pure(self, tol=tol)

    def probability(self, basis_state: int) -> float:
        """P(i) = ⟨i|ρ|i⟩"""
        return float(self._matrix[basis_state, basis_state].real)

    def expectation_value(self, operator: NDArray[np.complex128]) -> complex:
        """⟨Ô⟩ = Tr(ρÔ)"""
        return complex(np.trace(self._matrix @ operator))

    def allclose(self, other: 'MixedState', tol: float = TOLERANCE) -> bool:
        """Равенство состояний с точностью до единого допуска библиотеки"""
        if self._matrix.shape != other._matrix.shape:
            return False
        return bool(np.allclose(self._matrix, other._matrix, atol=tol, rtol=0.0))

    def __repr__(self) -> str:
        pure_str = "pure" if self.is_pure() else "mixed"
        return f"MixedState(dims={self._dims!r}, {pure_str}, " \
               f"purity={self.purity():.4f})"

    @classmethod
    def from_matrix(cls, matrix: NDArray[np.complex128],
                    dims: Optional[Dims] = None,
                    tol: float = TOLERANCE) -> 'MixedState':
        """
        Проверенный конструктор из произвольной матрицы

        Raises:
            InvalidState: матрица не эрмитова, не PSD или Tr ≠ 1
            DimensionMismatch: dims не согласована с размером матрицы
        """
        return cls(matrix, dims=dims, validate=True, tol=tol)

    @classmethod
    def pure(cls, ket: Union[Ket, Sequence[complex], NDArray[np.complex128]]) -> 'MixedState':
        """
        Чистое состояние ρ = |ψ⟩⟨ψ|

        PSD и единичный след следуют из нормировки ψ.
        """
        if not isinstance(ket, Ket):
            ket = Ket(ket, normalize=False)
        psi = ket.vector
        matrix = np.outer(psi, psi.conj())
        return cls(matrix, dims=ket.dims, validate=False)

    @classmethod
    def of_classical(cls, distribution) -> 'MixedState':
        """
        Классическое вложение: ρ = diag(p₁, ..., pₙ)

        Args:
            distribution: Distribution или массив весов
        """
        from ..ensembles.distribution import Distribution

        if not isinstance(distribution, Distribution):
            distribution = Distribution(distribution)
        matrix = np.diag(distribution.weights).astype(np.complex128)
        return cls(matrix, validate=False)

    @classmethod
    def uniform(cls, n: int) -> 'MixedState':
        """Максимально смешанное состояние: ρ = I/n"""
        if n < 1:
            raise ValueError(f"Размерность должна быть ≥ 1, получено {n}")
        matrix = np.eye(n, dtype=np.complex128) / n
        return cls(matrix, validate=False)

    @classmethod
    def basis_state(cls, dim: int, index: int) -> 'MixedState':
        """Проектор |i⟩⟨i|"""
        return cls.pure(Ket.basis(dim, index))
