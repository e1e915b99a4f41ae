"""
Оптимальная скорость проверки гипотез

β_ε(ρ‖S) = inf_T  sup_{σ∈S} Tr[T σ]
           по 0 ⪯ T ⪯ I, Tr[(I - T) ρ] ≤ ε

Минимальная в худшем случае вероятность принять альтернативу σ ∈ S за ρ
при вероятности ошибочно отвергнуть ρ не более ε.

Общий случай решается как SDP (CVXPY). Для одной альтернативы есть
замкнутая форма через порог Неймана–Пирсона для оператора tρ - σ.
"""

import warnings
import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from ..config import TOLERANCE, SDP_TOLERANCE, DEFAULT_SOLVER
from ..core.exceptions import DimensionMismatch
from ..core.states import Ket, MixedState
from ..core.measurements import MeasurementOperator


@dataclass
class HypothesisTestResult:
    """
    Результат оптимизации β_ε(ρ‖S)
    """
    value: float
    measurement: MeasurementOperator
    epsilon: float
    status: str
    worst_case_index: Optional[int] = None

    def __repr__(self) -> str:
        return (f"HypothesisTestResult(value={self.value:.6f}, "
                f"epsilon={self.epsilon}, status={self.status})")


def _check_epsilon(epsilon: float) -> float:
    epsilon = float(epsilon)
    if not 0.0 <= epsilon <= 1.0:
        raise ValueError(f"ε должно лежать в [0, 1], получено {epsilon}")
    return epsilon


def _alternatives(rho: MixedState,
                  alternatives: Iterable[Union[MixedState, Ket]]) -> List[MixedState]:
    """Множество альтернатив как список MixedState той же размерности, что ρ"""
    states = []
    for sigma in alternatives:
        if isinstance(sigma, Ket):
            sigma = MixedState.pure(sigma)
        if sigma.dim != rho.dim:
            raise DimensionMismatch(f"Альтернатива размерности {sigma.dim} для состояния размерности {rho.dim}")
        states.append(sigma)
    return states


def solve_hypothesis_test(rho: MixedState, epsilon: float,
                          alternatives: Iterable[Union[MixedState, Ket]],
                          solver: Optional[str] = None) -> HypothesisTestResult:
    """
    SDP для β_ε(ρ‖S)

    minimize    t
    subject to  0 ⪯ T ⪯ I
                Tr[(I - T) ρ] ≤ ε
                Tr[T σₖ] ≤ t   для всех σₖ ∈ S

    Пустое S: внутренний супремум равен 0 по соглашению, β = 0 при любых ρ, ε.

    Args:
        rho: Проверяемое состояние
        epsilon: Допустимая вероятность ошибки первого рода
        alternatives: Конечное множество альтернатив S
        solver: Решатель CVXPY (по умолчанию - выбор CVXPY)

    Returns:
        HypothesisTestResult со значением и оптимальным оператором T
    """
    epsilon = _check_epsilon(epsilon)
    states = _alternatives(rho, alternatives)

    if not states:
        return HypothesisTestResult(value=0.0,
                                    measurement=MeasurementOperator.identity(rho.dim),
                                    epsilon=epsilon,
                                    status="empty")

    import cvxpy as cp

    dim = rho.dim
    identity = np.eye(dim)

    T = cp.Variable((dim, dim), hermitian=True)
    t = cp.Variable()

    constraints = [
        T >> 0,
        identity - T >> 0,
        cp.real(cp.trace((identity - T) @ rho.matrix.copy())) <= epsilon
    ]
    constraints += [cp.real(cp.trace(T @ sigma.matrix.copy())) <= t for sigma in states]

    problem = cp.Problem(cp.Minimize(t), constraints)
    problem.solve(solver=solver or DEFAULT_SOLVER)

    if problem.value is None or T.value is None:
        raise RuntimeError(f"SDP не решена (status: {problem.status})")

    if problem.status != cp.OPTIMAL:
        warnings.warn(f"SDP не сошлось оптимально (status: {problem.status})", RuntimeWarning)

    # Проекция численного решения на [0, I]
    matrix = (T.value + T.value.conj().T) / 2
    eigenvalues, eigenvectors = np.linalg.eigh(matrix)
    eigenvalues = np.clip(eigenvalues, 0.0, 1.0)
    matrix = eigenvectors @ np.diag(eigenvalues) @ eigenvectors.conj().T
    measurement = MeasurementOperator(matrix, validate=False)

    rejection = measurement.complement().probability(rho)
    if rejection > epsilon + SDP_TOLERANCE:
        warnings.warn(f"Ограничение Tr[(I - T)ρ] ≤ ε нарушено на {rejection - epsilon:.2e}",
                      RuntimeWarning)

    false_accept = [measurement.probability(sigma) for sigma in states]

    return HypothesisTestResult(value=float(np.clip(problem.value, 0.0, 1.0)),
                                measurement=measurement,
                                epsilon=epsilon,
                                status=problem.status,
                                worst_case_index=int(np.argmax(false_accept)))


def optimal_hypothesis_rate(rho: MixedState, epsilon: float,
                            alternatives: Iterable[Union[MixedState, Ket]],
                            solver: Optional[str] = None) -> float:
    """
    β_ε(ρ‖S) ∈ [0, 1]

    Не возрастает по ε; β_ε(ρ‖∅) = 0.
    """
    return solve_hypothesis_test(rho, epsilon, alternatives, solver=solver).value


def _positive_part_trace(matrix: np.ndarray) -> float:
    """Tr(A)₊ - сумма положительных собственных значений"""
    eigenvalues = np.linalg.eigvalsh(matrix)
    return float(eigenvalues[eigenvalues > 0].sum())


def neyman_pearson_rate(rho: MixedState, sigma: Union[MixedState, Ket], epsilon: float,
                        tol: float = TOLERANCE, max_iter: int = 500) -> float:
    """
    Замкнутая форма β_ε(ρ‖{σ}) через порог Неймана–Пирсона

    По двойственности Лагранжа:
        β_ε(ρ‖{σ}) = max_{t ≥ 0}  t(1 - ε) - Tr(tρ - σ)₊

    Оптимальный тест - проектор на положительную часть tρ - σ (с
    рандомизацией на ядре). Функция вогнута по t; так как
    Tr(tρ - σ)₊ ≥ t - 1, максимум достигается на [0, 1/ε].

    При ε = 0 тест обязан принимать весь носитель ρ: β = Tr[Π_ρ σ].
    """
    epsilon = _check_epsilon(epsilon)
    sigma, = _alternatives(rho, [sigma])

    if epsilon >= 1.0:
        return 0.0

    if epsilon == 0.0:
        eigenvalues, eigenvectors = np.linalg.eigh(rho.matrix)
        support = eigenvectors[:, eigenvalues > tol]
        projector = support @ support.conj().T
        return float(np.clip(np.trace(projector @ sigma.matrix).real, 0.0, 1.0))

    def dual(t: float) -> float:
        return t * (1.0 - epsilon) - _positive_part_trace(t * rho.matrix - sigma.matrix)

    # Поиск золотого сечения для вогнутой функции
    ratio = (np.sqrt(5.0) - 1.0) / 2.0
    a, b = 0.0, 1.0 / epsilon
    c, d = b - ratio * (b - a), a + ratio * (b - a)
    fc, fd = dual(c), dual(d)

    for _ in range(max_iter):
        if b - a < 1e-13 * max(1.0, b):
            break
        if fc >= fd:
            b, d, fd = d, c, fc
            c = b - ratio * (b - a)
            fc = dual(c)
        else:
            a, c, fc = c, d, fd
            d = a + ratio * (b - a)
            fd = dual(d)

    value = max(dual(0.0), fc, fd, dual((a + b) / 2))
    return float(np.clip(value, 0.0, 1.0))


def singleton_decomposition_rate(rho: MixedState, epsilon: float,
                                 alternatives: Iterable[Union[MixedState, Ket]],
                                 closed_form: bool = False,
                                 solver: Optional[str] = None) -> float:
    """
    sup_{σ∈S} β_ε(ρ‖{σ}) - разложение на задачи с одной альтернативой

    Для выпуклого S совпадает с β_ε(ρ‖S) (минимакс Сиона); для конечного
    невыпуклого S это нижняя оценка β_ε(ρ‖S).

    Args:
        closed_form: Использовать замкнутую форму Неймана–Пирсона вместо SDP
    """
    epsilon = _check_epsilon(epsilon)
    states = _alternatives(rho, alternatives)

    if not states:
        return 0.0

    if closed_form:
        rates = [neyman_pearson_rate(rho, sigma, epsilon) for sigma in states]
    else:
        rates = [optimal_hypothesis_rate(rho, epsilon, [sigma], solver=solver) for sigma in states]

    return float(max(rates))
