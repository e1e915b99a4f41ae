"""
Тесты для core модулей: states, tensor, spectral, purification, measurements
"""

import pytest
import numpy as np
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from steinlab.core.exceptions import (
    InvalidState,
    DimensionMismatch,
    InvalidMeasurement
)
from steinlab.core.states import Ket, MixedState
from steinlab.core.tensor import (
    tensor_product,
    product,
    trace_left,
    trace_right,
    relabel,
    swap,
    assoc,
    assoc_inv,
    partial_trace,
    schmidt_decomposition
)
from steinlab.core.spectral import spectrum, purity, is_pure, to_ket, rank, von_neumann_entropy
from steinlab.core.purification import purify, purification_state
from steinlab.core.measurements import MeasurementOperator
from steinlab.core.random import random_mixed_state, random_ket
from steinlab.metrics.validation import check_physicality


def _with_dims(rho, dims):
    """Та же матрица с другой структурой индексов"""
    return MixedState.from_matrix(rho.matrix, dims=dims)


class TestKet:
    """Тесты для Ket"""

    def test_normalization(self):
        """Тест нормализации состояния"""
        ket = Ket([1, 1], normalize=True)
        assert np.isclose(np.linalg.norm(ket.vector), 1.0)

    def test_unnormalized_rejected(self):
        """Ненормированный вектор без normalize=True отвергается"""
        with pytest.raises(InvalidState):
            Ket([1, 1], normalize=False)

    def test_zero_vector(self):
        """Нулевой вектор нельзя нормализовать"""
        with pytest.raises(InvalidState):
            Ket([0, 0])

    def test_basis(self):
        """Тест |i⟩"""
        ket = Ket.basis(3, 2)
        assert np.isclose(ket.probability(2), 1.0)
        assert np.isclose(ket.probability(0), 0.0)

    def test_product_dims(self):
        """|ψ⟩ ⊗ |φ⟩ имеет структуру (d₁, d₂)"""
        ket = Ket.basis(2, 1).product(Ket.basis(3, 0))
        assert ket.dims == (2, 3)
        assert np.isclose(ket.probability(3), 1.0)

    def test_equals_up_to_phase(self):
        """Глобальная фаза не различается"""
        psi = random_ket(3, seed=1)
        phased = Ket(np.exp(0.7j) * psi.vector, normalize=False)
        assert psi.equals_up_to_phase(phased)


class TestMixedStateConstruction:
    """Тесты проверенных конструкторов MixedState"""

    def test_valid_matrix(self):
        """Допустимая матрица принимается"""
        rho = MixedState.from_matrix([[0.5, 0.5], [0.5, 0.5]])
        assert rho.dim == 2
        assert rho.is_pure()

    def test_non_hermitian(self):
        """Неэрмитова матрица отвергается"""
        with pytest.raises(InvalidState):
            MixedState.from_matrix([[0.5, 0.3], [0.1, 0.5]])

    def test_not_positive(self):
        """Отрицательное собственное значение отвергается"""
        with pytest.raises(InvalidState):
            MixedState.from_matrix(np.diag([1.5, -0.5]))

    def test_wrong_trace(self):
        """След ≠ 1 отвергается"""
        with pytest.raises(InvalidState):
            MixedState.from_matrix(np.eye(2))

    def test_non_square(self):
        """Неквадратная матрица отвергается"""
        with pytest.raises(InvalidState):
            MixedState.from_matrix(np.ones((2, 3)) / 2)

    def test_dims_mismatch(self):
        """Структура индексов должна совпадать с размерностью"""
        with pytest.raises(DimensionMismatch):
            MixedState.from_matrix(np.eye(4) / 4, dims=(2, 3))

    def test_immutable(self):
        """Матрица состояния доступна только для чтения"""
        rho = MixedState.uniform(2)
        with pytest.raises(ValueError):
            rho.matrix[0, 0] = 1.0

    def test_input_copied(self):
        """Изменение исходного массива не влияет на состояние"""
        data = np.eye(2, dtype=np.complex128) / 2
        rho = MixedState.from_matrix(data)
        data[0, 0] = 5.0
        assert np.isclose(rho.matrix[0, 0], 0.5)

    def test_pure(self):
        """ρ = |ψ⟩⟨ψ| - допустимое состояние"""
        rho = MixedState.pure(random_ket(4, seed=3))
        assert check_physicality(rho.matrix)["is_physical"]
        assert rho.is_pure()

    def test_of_classical(self):
        """Классическое вложение - диагональная матрица"""
        rho = MixedState.of_classical([0.2, 0.3, 0.5])
        assert np.allclose(rho.matrix, np.diag([0.2, 0.3, 0.5]))

    def test_uniform(self):
        """I/n"""
        rho = MixedState.uniform(4)
        assert np.allclose(rho.matrix, np.eye(4) / 4)

    def test_uniform_requires_positive_dimension(self):
        with pytest.raises(ValueError):
            MixedState.uniform(0)


class TestTensorAlgebra:
    """Тесты тензорного произведения, частичного следа и переиндексации"""

    def test_trace_left_of_product(self):
        """Tr_A(ρ₁ ⊗ ρ₂) = ρ₂"""
        rho1 = random_mixed_state(2, seed=10)
        rho2 = random_mixed_state(3, seed=11)
        reduced = trace_left(product(rho1, rho2))
        assert reduced.allclose(rho2)
        assert reduced.dims == 3

    def test_trace_right_of_product(self):
        """Tr_B(ρ₁ ⊗ ρ₂) = ρ₁"""
        rho1 = random_mixed_state(3, seed=12)
        rho2 = random_mixed_state(2, seed=13)
        reduced = trace_right(product(rho1, rho2))
        assert reduced.allclose(rho1)
        assert reduced.dims == 3

    def test_tensor_product_arrays(self):
        """A ⊗ B ⊗ C для массивов"""
        result = tensor_product(np.eye(2), np.ones((3, 3)), np.eye(1))
        assert result.shape == (6, 6)
        assert np.allclose(result, np.kron(np.eye(2), np.ones((3, 3))))
        with pytest.raises(ValueError):
            tensor_product()

    def test_product_is_state(self):
        """ρ₁ ⊗ ρ₂ удовлетворяет всем инвариантам"""
        rho = product(random_mixed_state(2, seed=1), random_mixed_state(2, seed=2))
        assert check_physicality(rho.matrix)["is_physical"]
        assert rho.dims == (2, 2)

    def test_partial_trace_element_formula(self):
        """result[i, j] = Σₖ ρ[(k, i), (k, j)]"""
        rho = _with_dims(random_mixed_state(6, seed=4), (2, 3))
        expected = np.zeros((3, 3), dtype=np.complex128)
        for i in range(3):
            for j in range(3):
                expected[i, j] = sum(rho.matrix[k * 3 + i, k * 3 + j] for k in range(2))
        assert np.allclose(trace_left(rho).matrix, expected)

    def test_reduced_state_is_state(self):
        """Частичный след состояния - состояние"""
        rho = _with_dims(random_mixed_state(6, seed=5), (3, 2))
        assert check_physicality(trace_left(rho).matrix)["is_physical"]
        assert check_physicality(trace_right(rho).matrix)["is_physical"]

    def test_trace_requires_composite(self):
        """Частичный след элементарной системы невозможен"""
        with pytest.raises(DimensionMismatch):
            trace_left(MixedState.uniform(4))

    def test_partial_trace_array(self):
        """Частичный след массива по списку размерностей"""
        bell = Ket([1, 0, 0, 1]).to_mixed_state()
        assert np.allclose(partial_trace(bell.matrix, [2, 2], 1), np.eye(2) / 2)
        with pytest.raises(DimensionMismatch):
            partial_trace(bell.matrix, [2, 3], 0)

    def test_relabel_preserves_invariants(self):
        """Переиндексация биекцией сохраняет эрмитовость, PSD и след"""
        rho = random_mixed_state(4, seed=6)
        relabelled = relabel(rho, [2, 0, 3, 1])
        assert check_physicality(relabelled.matrix)["is_physical"]
        assert np.isclose(relabelled.matrix[0, 1], rho.matrix[2, 0])

    def test_relabel_wrong_length(self):
        with pytest.raises(DimensionMismatch):
            relabel(MixedState.uniform(3), [0, 1])

    def test_relabel_not_bijection(self):
        with pytest.raises(ValueError):
            relabel(MixedState.uniform(3), [0, 0, 1])

    def test_swap_involution(self):
        """SWAP ∘ SWAP = id"""
        rho = _with_dims(random_mixed_state(6, seed=7), (2, 3))
        swapped = swap(rho)
        assert swapped.dims == (3, 2)
        assert swap(swapped).allclose(rho)
        assert swap(swapped).dims == (2, 3)

    def test_swap_of_product(self):
        """SWAP(ρ₁ ⊗ ρ₂) = ρ₂ ⊗ ρ₁"""
        rho1 = random_mixed_state(2, seed=8)
        rho2 = random_mixed_state(3, seed=9)
        assert swap(product(rho1, rho2)).allclose(product(rho2, rho1))

    def test_swap_exchanges_reductions(self):
        """Tr_A(SWAP ρ) = Tr_B(ρ)"""
        rho = _with_dims(random_mixed_state(6, seed=14), (3, 2))
        assert trace_left(swap(rho)).allclose(trace_right(rho))

    def test_assoc_round_trips(self):
        """assoc ∘ assoc⁻¹ = id и assoc⁻¹ ∘ assoc = id"""
        base = random_mixed_state(12, seed=15)
        left_bracketed = _with_dims(base, ((2, 3), 2))
        right_bracketed = _with_dims(base, (2, (3, 2)))

        assert assoc(left_bracketed).dims == (2, (3, 2))
        assert assoc_inv(assoc(left_bracketed)).allclose(left_bracketed)
        assert assoc_inv(assoc(left_bracketed)).dims == ((2, 3), 2)
        assert assoc(assoc_inv(right_bracketed)).allclose(right_bracketed)
        assert assoc(assoc_inv(right_bracketed)).dims == (2, (3, 2))

    def test_assoc_trace_laws(self):
        """Согласование ассоциатора с частичными следами"""
        rho = _with_dims(random_mixed_state(12, seed=16), ((2, 3), 2))
        rebracketed = assoc(rho)

        assert trace_left(trace_left(rebracketed)).allclose(trace_left(rho))
        assert trace_right(rebracketed).allclose(trace_right(trace_right(rho)))
        assert trace_right(trace_left(rebracketed)).allclose(trace_left(trace_right(rho)))

    def test_assoc_requires_triple(self):
        with pytest.raises(DimensionMismatch):
            assoc(_with_dims(MixedState.uniform(4), (2, 2)))

    def test_schmidt_bell(self):
        """Bell-состояние имеет два равных коэффициента Шмидта"""
        coefficients, _, _ = schmidt_decomposition(np.array([1, 0, 0, 1]) / np.sqrt(2), 2, 2)
        assert np.allclose(coefficients, [1 / np.sqrt(2), 1 / np.sqrt(2)])


class TestSpectral:
    """Тесты спектрального анализа"""

    def test_spectrum_is_distribution(self):
        """Спектр неотрицателен и суммируется в 1"""
        weights = spectrum(random_mixed_state(5, seed=20)).weights
        assert np.all(weights >= 0)
        assert np.isclose(weights.sum(), 1.0)

    def test_spectrum_of_classical(self):
        dist = spectrum(MixedState.of_classical([0.7, 0.3]))
        assert np.allclose(np.sort(dist.weights), [0.3, 0.7])

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 8])
    def test_uniform_purity(self, n):
        """Tr((I/n)²) = 1/n"""
        assert np.isclose(purity(MixedState.uniform(n)), 1.0 / n)

    def test_pure_purity(self):
        """Tr(ρ²) = 1 для ρ = |ψ⟩⟨ψ|"""
        for seed in range(5):
            assert np.isclose(purity(MixedState.pure(random_ket(4, seed=seed))), 1.0)

    def test_purity_bounds(self):
        """1/d ≤ Tr(ρ²) ≤ 1"""
        rho = random_mixed_state(4, seed=21)
        assert 0.25 - 1e-12 <= purity(rho) <= 1.0

    def test_is_pure_equivalences(self):
        """Чистота ⇔ спектр сосредоточен в точке ⇔ ρ = |ψ⟩⟨ψ|"""
        psi = random_ket(3, seed=22)
        rho = MixedState.pure(psi)
        assert is_pure(rho)
        assert spectrum(rho).is_point_mass()
        assert to_ket(rho).equals_up_to_phase(psi)

        mixed = random_mixed_state(3, seed=23)
        assert not is_pure(mixed)
        assert not spectrum(mixed).is_point_mass()
        with pytest.raises(ValueError):
            to_ket(mixed)

    def test_rank_and_entropy(self):
        rho = MixedState.of_classical([0.5, 0.5, 0.0])
        assert rank(rho) == 2
        assert np.isclose(von_neumann_entropy(rho), 1.0)
        assert np.isclose(von_neumann_entropy(MixedState.basis_state(3, 0)), 0.0)


class TestPurification:
    """Тесты очищения: Tr₂ |Ψ⟩⟨Ψ| = ρ"""

    @pytest.mark.parametrize("rho", [
        MixedState.uniform(2),
        MixedState.pure(Ket([1, 1j])),
        MixedState.of_classical([0.7, 0.3, 0.0]),
    ])
    def test_trace_right_recovers_state(self, rho):
        """Вырожденный спектр, чистое состояние и ранг 2 с неравными весами"""
        psi = purify(rho)
        assert psi.dim == rho.dim ** 2
        assert np.isclose(np.linalg.norm(psi.vector), 1.0)
        assert trace_right(MixedState.pure(psi)).allclose(rho)

    def test_random_states(self):
        for seed in range(3):
            rho = random_mixed_state(3, rank=2, seed=seed)
            assert trace_right(purification_state(rho)).allclose(rho)

    def test_roundoff_negative_spectrum(self):
        """Собственные значения -1e-9 < λ < 0 допустимы и не ломают нормировку"""
        rho = MixedState.from_matrix(np.diag([1 + 2.7e-9, -0.9e-9, -0.9e-9, -0.9e-9]))
        psi = purify(rho)
        assert np.isclose(np.linalg.norm(psi.vector), 1.0)
        assert trace_right(MixedState.pure(psi)).allclose(rho, tol=1e-8)

    def test_dims_structure(self):
        rho = _with_dims(random_mixed_state(4, seed=30), (2, 2))
        psi = purify(rho)
        assert psi.dims == ((2, 2), 4)
        assert trace_right(MixedState.pure(psi)).dims == (2, 2)


class TestMeasurementOperator:
    """Тесты оператора измерения"""

    def test_valid(self):
        T = MeasurementOperator(np.diag([1.0, 0.25]))
        assert np.isclose(T.probability(MixedState.uniform(2)), 0.625)
        assert np.isclose(T.complement().probability(MixedState.uniform(2)), 0.375)

    def test_above_identity(self):
        with pytest.raises(InvalidMeasurement):
            MeasurementOperator(np.diag([1.5, 0.0]))

    def test_negative(self):
        with pytest.raises(InvalidMeasurement):
            MeasurementOperator(np.diag([-0.2, 0.5]))

    def test_non_hermitian(self):
        with pytest.raises(InvalidMeasurement):
            MeasurementOperator(np.array([[0.5, 0.2], [0.0, 0.5]]))

    def test_projector(self):
        T = MeasurementOperator.projector(Ket.basis(2, 0))
        assert np.isclose(T.probability(MixedState.basis_state(2, 0)), 1.0)
        assert np.isclose(T.probability(MixedState.basis_state(2, 1)), 0.0)

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch):
            MeasurementOperator.identity(2).probability(MixedState.uniform(3))

    def test_trivial_tests(self):
        """T = I принимает всё, T = 0 - ничего"""
        rho = random_mixed_state(3, seed=40)
        assert np.isclose(MeasurementOperator.identity(3).probability(rho), 1.0)
        assert np.isclose(MeasurementOperator.zero(3).probability(rho), 0.0)

    def test_expectation_matches_probability(self):
        """Tr(Tρ) = ⟨T⟩ для MixedState и ⟨ψ|T|ψ⟩ для Ket"""
        T = MeasurementOperator(np.diag([0.2, 0.9]))
        psi = Ket([1, 1])
        assert np.isclose(psi.expectation_value(T.matrix).real, 0.55)
        assert np.isclose(psi.to_mixed_state().expectation_value(T.matrix).real,
                          T.probability(psi.to_mixed_state()))


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
