"""
Поставщик «свободных» состояний для задачи проверки гипотез

Теория ресурсов задаёт для каждого числа копий n множество свободных
состояний Fₙ на H^{⊗n}; оптимизатор использует Fₙ как множество
альтернатив S.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Union

from ..core.exceptions import DimensionMismatch
from ..core.states import Ket, MixedState
from ..core.tensor import product


def tensor_power(rho: MixedState, n: int) -> MixedState:
    """
    Тензорная степень ρ^{⊗n}

    Скобки расставляются слева: ((ρ ⊗ ρ) ⊗ ρ) ⊗ ...
    """
    if n < 1:
        raise ValueError(f"Число копий должно быть ≥ 1, получено {n}")

    result = rho
    for _ in range(n - 1):
        result = product(result, rho)
    return result


class ResourceTheory(ABC):
    """
    Абстрактная теория ресурсов

    Конкретные теории определяют free_states(n) - конечное множество
    свободных состояний на n копиях системы размерности dim.
    """

    @property
    @abstractmethod
    def dim(self) -> int:
        """Размерность одной копии системы"""
        pass

    @abstractmethod
    def free_states(self, n: int) -> List[MixedState]:
        """Свободные состояния на n копиях"""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dim={self.dim})"


class ProductResourceTheory(ResourceTheory):
    """
    Свободные состояния - тензорные степени заданных состояний: Fₙ = {σ^{⊗n}}

    С одним σ это классическая задача Штейна: -log β_n / n → D(ρ‖σ).
    """

    def __init__(self, states: Sequence[Union[MixedState, Ket]]):
        """
        Args:
            states: Свободные состояния одной копии
        """
        states = [MixedState.pure(s) if isinstance(s, Ket) else s for s in states]

        if len(states) == 0:
            raise ValueError("Нужно хотя бы одно свободное состояние")

        dims = {s.dim for s in states}
        if len(dims) != 1:
            raise DimensionMismatch(f"Свободные состояния имеют разные размерности: {sorted(dims)}")

        self._states = states

    @property
    def dim(self) -> int:
        return self._states[0].dim

    @property
    def states(self) -> List[MixedState]:
        return list(self._states)

    def free_states(self, n: int) -> List[MixedState]:
        return [tensor_power(sigma, n) for sigma in self._states]
