"""
Оценка показателя Штейна на конечной последовательности блоков

Предельные теоремы (обобщённая лемма Штейна) - утверждения о n → ∞ и
здесь не воспроизводятся. Вместо этого β_ε(ρ^{⊗n}‖Fₙ) вычисляется для
нескольких n и по ним оценивается скорость убывания. Вычисления для
разных n независимы.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.states import MixedState
from .rate import optimal_hypothesis_rate, neyman_pearson_rate
from .resource import ResourceTheory, tensor_power


@dataclass
class SteinSequence:
    """
    Значения β_n = β_ε(ρ^{⊗n}‖Fₙ) и показатели -log β_n / n
    """
    epsilon: float
    block_sizes: List[int] = field(default_factory=list)
    rates: List[float] = field(default_factory=list)

    @property
    def exponents(self) -> List[float]:
        """-log β_n / n (∞ при β_n = 0)"""
        return [(-np.log(beta) / n) if beta > 0 else float('inf')
                for n, beta in zip(self.block_sizes, self.rates)]

    def fitted_exponent(self) -> float:
        """
        Наклон линейной подгонки -log β_n ≈ D·n + c

        Константа c поглощает поправки порядка √n и log n на малых блоках.
        """
        points = [(n, beta) for n, beta in zip(self.block_sizes, self.rates) if beta > 0]
        if len(points) < 2:
            raise ValueError("Для подгонки нужно хотя бы два блока с β_n > 0")
        ns = np.array([n for n, _ in points], dtype=np.float64)
        log_rates = -np.log([beta for _, beta in points])
        slope, _ = np.polyfit(ns, log_rates, 1)
        return float(slope)

    def __repr__(self) -> str:
        return f"SteinSequence(epsilon={self.epsilon}, block_sizes={self.block_sizes})"


def rate_sequence(rho: MixedState, epsilon: float, theory: ResourceTheory,
                  block_sizes: Sequence[int],
                  closed_form: bool = False,
                  solver: Optional[str] = None) -> SteinSequence:
    """
    β_ε(ρ^{⊗n}‖Fₙ) для n из block_sizes

    Args:
        rho: Состояние одной копии
        epsilon: Допустимая ошибка первого рода
        theory: Поставщик свободных состояний
        block_sizes: Размеры блоков n (возрастающие)
        closed_form: Для одного свободного состояния использовать формулу
            Неймана–Пирсона вместо SDP
        solver: Решатель CVXPY
    """
    if rho.dim != theory.dim:
        raise ValueError(f"Размерность состояния {rho.dim} ≠ размерности теории {theory.dim}")

    sequence = SteinSequence(epsilon=float(epsilon))

    for n in block_sizes:
        rho_n = tensor_power(rho, n)
        free = theory.free_states(n)

        if closed_form and len(free) == 1:
            beta = neyman_pearson_rate(rho_n, free[0], epsilon)
        else:
            beta = optimal_hypothesis_rate(rho_n, epsilon, free, solver=solver)

        sequence.block_sizes.append(int(n))
        sequence.rates.append(beta)

    return sequence
