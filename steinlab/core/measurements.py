"""
Модуль операторов измерения (элементы POVM)

Двухисходное измерение {T, I - T}, где 0 ⪯ T ⪯ I.
Вероятность принять гипотезу «ρ»: P = Tr(T ρ).
"""

import numpy as np
from numpy.typing import NDArray

from ..config import TOLERANCE
from .exceptions import InvalidMeasurement, DimensionMismatch
from .states import Ket, MixedState


class MeasurementOperator:
    """
    Эрмитов оператор T с 0 ⪯ T ⪯ I

    Используется в задаче проверки гипотез: Tr(Tσ) - вероятность ошибочно
    принять альтернативу σ за ρ, Tr((I - T)ρ) - вероятность отвергнуть ρ.
    """

    def __init__(self, matrix: NDArray[np.complex128],
                 validate: bool = True,
                 tol: float = TOLERANCE):
        """
        Args:
            matrix: Матрица оператора
            validate: Проверять ли эрмитовость и 0 ⪯ T ⪯ I
            tol: Допустимая погрешность
        """
        array = np.array(matrix, dtype=np.complex128)

        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise InvalidMeasurement("Оператор измерения должен быть квадратной матрицей")

        if validate:
            if not np.allclose(array, array.conj().T, atol=tol, rtol=0.0):
                raise InvalidMeasurement("Оператор измерения не является эрмитовым")

            array = (array + array.conj().T) / 2
            eigenvalues = np.linalg.eigvalsh(array)
            if eigenvalues.min() < -tol or eigenvalues.max() > 1.0 + tol:
                raise InvalidMeasurement(f"Спектр оператора вне [0, 1]: "
                                         f"[{eigenvalues.min():.3e}, {eigenvalues.max():.3e}]")

        array.setflags(write=False)
        self._matrix = array

    @property
    def matrix(self) -> NDArray[np.complex128]:
        return self._matrix

    @property
    def dim(self) -> int:
        return self._matrix.shape[0]

    def probability(self, rho: MixedState) -> float:
        """P = Tr(T ρ) ∈ [0, 1]"""
        if rho.dim != self.dim:
            raise DimensionMismatch(f"Оператор размерности {self.dim} и состояние размерности {rho.dim}")
        value = np.trace(self._matrix @ rho.matrix).real
        return float(np.clip(value, 0.0, 1.0))

    def complement(self) -> 'MeasurementOperator':
        """I - T"""
        identity = np.eye(self.dim, dtype=np.complex128)
        return MeasurementOperator(identity - self._matrix, validate=False)

    def __repr__(self) -> str:
        return f"MeasurementOperator(dim={self.dim})"

    @classmethod
    def identity(cls, dim: int) -> 'MeasurementOperator':
        return cls(np.eye(dim, dtype=np.complex128), validate=False)

    @classmethod
    def zero(cls, dim: int) -> 'MeasurementOperator':
        return cls(np.zeros((dim, dim), dtype=np.complex128), validate=False)

    @classmethod
    def projector(cls, ket: Ket) -> 'MeasurementOperator':
        """Проектор |ψ⟩⟨ψ|"""
        psi = ket.vector
        return cls(np.outer(psi, psi.conj()), validate=False)
