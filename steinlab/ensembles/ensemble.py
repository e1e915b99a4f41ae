"""
Ансамбли состояний и смешивание

Ансамбль {pᵢ, ρᵢ} - одна из реализаций смешанного состояния как
статистической смеси. Разные ансамбли могут давать одно и то же состояние.
"""

import numpy as np
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple, Union

from ..config import TOLERANCE
from ..core.exceptions import DimensionMismatch, InvalidState
from ..core.states import Ket, MixedState
from ..core.spectral import eigendecomposition, is_pure, purity
from .distribution import Distribution

Member = Union[MixedState, Ket]


def _as_state(member: Member) -> MixedState:
    if isinstance(member, Ket):
        return MixedState.pure(member)
    if isinstance(member, MixedState):
        return member
    raise TypeError(f"Элемент ансамбля должен быть MixedState или Ket, получено {type(member).__name__}")


class Ensemble:
    """
    Взвешенный набор состояний {pᵢ, ρᵢ}

    Элементы - MixedState или Ket (чистые состояния). Элемент i
    соответствует исходу distribution.outcomes[i]. Порядок индексов не
    несёт смысла: mix и average инвариантны относительно relabel.
    """

    def __init__(self, members: Union[Sequence[Member], Dict[Hashable, Member]],
                 distribution: Optional[Union[Distribution, Sequence[float]]] = None):
        """
        Args:
            members: Список состояний или словарь {исход: состояние}
            distribution: Распределение по исходам (по умолчанию равномерное)
        """
        outcomes = None
        if isinstance(members, dict):
            outcomes = list(members.keys())
            members = list(members.values())
        members = list(members)

        if len(members) == 0:
            raise ValueError("Ансамбль должен содержать хотя бы одно состояние")

        if distribution is None:
            distribution = Distribution(np.full(len(members), 1.0 / len(members)),
                                        outcomes=outcomes)
        elif not isinstance(distribution, Distribution):
            distribution = Distribution(distribution, outcomes=outcomes)
        elif outcomes is not None and tuple(outcomes) != distribution.outcomes:
            distribution = Distribution([distribution[o] for o in outcomes], outcomes=outcomes)

        if len(distribution) != len(members):
            raise DimensionMismatch(f"Число состояний {len(members)} ≠ числу весов {len(distribution)}")

        for member in members:
            _as_state(member)

        dims = {member.dim for member in members}
        if len(dims) != 1:
            raise DimensionMismatch(f"Состояния ансамбля имеют разные размерности: {sorted(dims)}")

        self._members = tuple(members)
        self._distribution = distribution

    @property
    def members(self) -> Tuple[Member, ...]:
        return self._members

    @property
    def states(self) -> Tuple[MixedState, ...]:
        """Элементы как матрицы плотности"""
        return tuple(_as_state(m) for m in self._members)

    @property
    def distribution(self) -> Distribution:
        return self._distribution

    @property
    def weights(self):
        return self._distribution.weights

    @property
    def dim(self) -> int:
        return self._members[0].dim

    def __len__(self) -> int:
        return len(self._members)

    def items(self) -> List[Tuple[Hashable, float, Member]]:
        """Тройки (исход, вес, состояние)"""
        return [(o, w, m) for (o, w), m in zip(self._distribution.items(), self._members)]

    def relabel(self, perm: Sequence[int]) -> 'Ensemble':
        """Переиндексация биекцией: новый элемент i ← старый элемент perm[i]"""
        distribution = self._distribution.relabel(perm)
        return Ensemble([self._members[i] for i in perm], distribution)

    def __repr__(self) -> str:
        return f"Ensemble(size={len(self)}, dim={self.dim})"


def convex_combination(states: Sequence[MixedState],
                       weights: Union[Distribution, Sequence[float]]) -> MixedState:
    """
    Выпуклая комбинация Σᵢ pᵢ ρᵢ

    Множество состояний выпукло, поэтому результат - состояние без
    повторной проверки.
    """
    if not isinstance(weights, Distribution):
        weights = Distribution(weights)
    states = list(states)
    if len(states) != len(weights):
        raise DimensionMismatch(f"Число состояний {len(states)} ≠ числу весов {len(weights)}")
    if len({rho.dim for rho in states}) != 1:
        raise DimensionMismatch("Состояния выпуклой комбинации имеют разные размерности")

    matrix = np.zeros_like(states[0].matrix)
    for p, rho in zip(weights.weights, states):
        matrix = matrix + p * rho.matrix

    return MixedState(matrix, dims=states[0].dims, validate=False)


def mix(ensemble: Ensemble) -> MixedState:
    """Смешивание ансамбля: ρ = Σᵢ pᵢ ρᵢ"""
    return convex_combination(ensemble.states, ensemble.distribution)


def average(f: Callable[[Member], Any], ensemble: Ensemble) -> Any:
    """
    Среднее Σᵢ pᵢ f(ρᵢ) для отображения в выпуклое множество

    Если f возвращает MixedState, результат - MixedState (выпуклая
    комбинация); иначе - взвешенная сумма чисел или массивов.
    """
    values = [f(member) for member in ensemble.members]

    if all(isinstance(v, MixedState) for v in values):
        return convex_combination(values, ensemble.distribution)

    total = sum(p * np.asarray(v) for p, v in zip(ensemble.weights, values))
    if np.ndim(total) == 0:
        total = total.item()
    return total


def trivial_ensemble(rho: MixedState, outcome: Hashable = 0) -> Ensemble:
    """Ансамбль из одного состояния с весом 1 (mix даёт ρ)"""
    return Ensemble([rho], Distribution.constant(outcome))


def spectral_ensemble(rho: MixedState) -> Ensemble:
    """
    Спектральный ансамбль {λⱼ, |vⱼ⟩}

    Собственные векторы - чистые элементы ансамбля, собственные значения -
    веса; mix(spectral_ensemble(ρ)) = ρ.
    """
    eigenvalues, eigenvectors = eigendecomposition(rho)
    weights = np.clip(eigenvalues, 0.0, None)
    weights = weights / weights.sum()

    members = [Ket(eigenvectors[:, j], normalize=True, dims=rho.dims)
               for j in range(rho.dim)]

    return Ensemble(members, Distribution(weights, validate=False))


def mixes_to_pure(ensemble: Ensemble, target: Union[Ket, MixedState],
                  tol: float = TOLERANCE) -> bool:
    """
    Характеризация чистой смеси

    Ансамбль смешивается в чистое состояние |ψ⟩⟨ψ| тогда и только тогда,
    когда каждый элемент с ненулевым весом равен |ψ⟩⟨ψ|.

    Raises:
        DimensionMismatch: размерности ансамбля и цели различны
        InvalidState: целевое состояние не чистое
    """
    target_state = _as_state(target)
    if target_state.dim != ensemble.dim:
        raise DimensionMismatch(f"Размерности {target_state.dim} и {ensemble.dim} не совпадают")
    if not is_pure(target_state, tol=tol):
        raise InvalidState(f"Целевое состояние не чистое: Tr(ρ²) = {purity(target_state):.6f}")

    return all(_as_state(member).allclose(target_state, tol=tol)
               for _, weight, member in ensemble.items()
               if weight > tol)
