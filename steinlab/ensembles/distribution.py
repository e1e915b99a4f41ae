"""
Конечные распределения вероятностей

Distribution(α): отображение конечного множества исходов α в
неотрицательные числа с суммой 1
"""

import numpy as np
from typing import Dict, Hashable, Optional, Sequence, Tuple, Union
from numpy.typing import NDArray

from ..config import TOLERANCE
from ..core.exceptions import InvalidDistribution, DimensionMismatch
from ..core.tensor import check_permutation


class Distribution:
    """
    Дискретное распределение вероятностей

    Свойства:
    - pᵢ ≥ 0
    - Σᵢ pᵢ = 1

    Исходы (outcomes) - произвольные hashable метки; по умолчанию 0, 1, ..., n-1.
    Порядок исходов не несёт смысла: распределения, отличающиеся биекцией
    меток, эквивалентны.
    """

    def __init__(self, weights: Union[Sequence[float], NDArray[np.float64], Dict[Hashable, float]],
                 outcomes: Optional[Sequence[Hashable]] = None,
                 validate: bool = True,
                 tol: float = TOLERANCE):
        """
        Args:
            weights: Веса pᵢ (массив или словарь {исход: вес})
            outcomes: Метки исходов (игнорируется, если weights - словарь)
            validate: Проверять ли неотрицательность и нормировку
            tol: Допустимая погрешность
        """
        if isinstance(weights, dict):
            outcomes = list(weights.keys())
            weights = list(weights.values())

        array = np.array(weights, dtype=np.float64)

        if array.ndim != 1 or array.size == 0:
            raise InvalidDistribution("Распределение должно быть непустым одномерным массивом весов")

        if outcomes is None:
            outcomes = range(array.size)
        outcomes = tuple(outcomes)

        if len(outcomes) != array.size:
            raise DimensionMismatch(f"Число исходов {len(outcomes)} ≠ числу весов {array.size}")
        if len(set(outcomes)) != len(outcomes):
            raise InvalidDistribution("Метки исходов должны быть различными")

        if validate:
            if not np.all(np.isfinite(array)):
                raise InvalidDistribution("Веса должны быть конечными числами")
            if np.any(array < -tol):
                raise InvalidDistribution(f"Отрицательный вес: min pᵢ = {array.min()}")
            total = array.sum()
            if not np.isclose(total, 1.0, atol=tol, rtol=0.0):
                raise InvalidDistribution(f"Сумма весов не равна 1: Σpᵢ = {total}")
            # Округлённые отрицательные нули
            array = np.clip(array, 0.0, None)

        array.setflags(write=False)
        self._weights = array
        self._outcomes = outcomes
        self._index = {outcome: i for i, outcome in enumerate(outcomes)}

    @property
    def weights(self) -> NDArray[np.float64]:
        """Веса pᵢ (только чтение)"""
        return self._weights

    @property
    def outcomes(self) -> Tuple[Hashable, ...]:
        return self._outcomes

    def __len__(self) -> int:
        return self._weights.size

    def __getitem__(self, outcome: Hashable) -> float:
        """Вероятность исхода"""
        if outcome not in self._index:
            raise KeyError(f"Исход {outcome!r} не принадлежит распределению")
        return float(self._weights[self._index[outcome]])

    def __iter__(self):
        return iter(self._outcomes)

    def items(self):
        """Пары (исход, вес)"""
        return zip(self._outcomes, (float(w) for w in self._weights))

    def as_dict(self) -> Dict[Hashable, float]:
        return dict(self.items())

    def support(self, tol: float = 0.0) -> Tuple[Hashable, ...]:
        """Исходы с ненулевым весом (pᵢ > tol)"""
        return tuple(o for o, w in zip(self._outcomes, self._weights) if w > tol)

    def relabel(self, perm: Sequence[int]) -> 'Distribution':
        """
        Переиндексация биекцией: новый исход i ← старый исход perm[i]

        Веса и метки переставляются вместе, поэтому распределение как
        отображение «исход → вес» не меняется.
        """
        perm = check_permutation(perm, len(self))
        return Distribution(self._weights[perm],
                            outcomes=[self._outcomes[i] for i in perm],
                            validate=False)

    def expectation(self, values: Sequence[float]) -> float:
        """E[f] = Σᵢ pᵢ f(i)"""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self._weights.shape:
            raise DimensionMismatch(f"Число значений {values.shape} ≠ числу исходов {self._weights.shape}")
        return float(np.dot(self._weights, values))

    def entropy(self, base: float = 2.0) -> float:
        """Энтропия Шеннона H(p) = -Σᵢ pᵢ log pᵢ"""
        p = self._weights[self._weights > 0]
        return float(-np.sum(p * np.log(p)) / np.log(base))

    def is_point_mass(self, tol: float = TOLERANCE) -> bool:
        """Проверка, что распределение сосредоточено в одном исходе"""
        return bool(np.isclose(self._weights.max(), 1.0, atol=tol, rtol=0.0))

    def __repr__(self) -> str:
        body = ", ".join(f"{o!r}: {w:.4f}" for o, w in self.items())
        return f"Distribution({{{body}}})"

    @classmethod
    def uniform(cls, n: int) -> 'Distribution':
        """Равномерное распределение на n исходах"""
        if n < 1:
            raise InvalidDistribution(f"Число исходов должно быть ≥ 1, получено {n}")
        return cls(np.full(n, 1.0 / n), validate=False)

    @classmethod
    def point_mass(cls, n: int, index: int) -> 'Distribution':
        """δ-распределение: вся масса в исходе index"""
        if not 0 <= index < n:
            raise ValueError(f"Индекс {index} вне диапазона [0, {n-1}]")
        weights = np.zeros(n)
        weights[index] = 1.0
        return cls(weights, validate=False)

    @classmethod
    def constant(cls, outcome: Hashable = 0) -> 'Distribution':
        """Распределение с единственным исходом"""
        return cls([1.0], outcomes=[outcome], validate=False)

