"""
Демонстрация оптимальной проверки гипотез
Пример использования SteinLab++: от алгебры состояний до показателя Штейна
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from steinlab.core.states import Ket, MixedState
from steinlab.core.tensor import product, trace_left, trace_right, swap
from steinlab.core.spectral import spectrum, purity, von_neumann_entropy
from steinlab.core.purification import purify
from steinlab.ensembles.ensemble import Ensemble, mix, spectral_ensemble
from steinlab.entanglement.separability import is_separable
from steinlab.hypothesis.rate import solve_hypothesis_test, neyman_pearson_rate
from steinlab.hypothesis.resource import ProductResourceTheory
from steinlab.hypothesis.stein import rate_sequence
from steinlab.metrics.distance import relative_entropy, trace_distance


def demo_state_algebra():
    """
    Демонстрация алгебры состояний: смеси, спектр, очищение
    """
    print("=" * 70)
    print("ДЕМОНСТРАЦИЯ 1: Алгебра смешанных состояний")
    print("=" * 70)

    # 1. Смесь базисных состояний
    ensemble = Ensemble([Ket.basis(2, 0), Ket.basis(2, 1)], [0.5, 0.5])
    rho = mix(ensemble)

    print(f"\n✓ ½|0⟩⟨0| + ½|1⟩⟨1| = I/2: {rho.allclose(MixedState.uniform(2))}")
    print(f"  Чистота: {purity(rho):.4f}")
    print(f"  Энтропия: {von_neumann_entropy(rho):.4f} бит")

    # 2. Спектр и спектральный ансамбль
    sigma = MixedState.of_classical([0.7, 0.3, 0.0])
    print(f"\n✓ Спектр diag(0.7, 0.3, 0): {spectrum(sigma)}")
    print(f"  mix(spectral_ensemble(σ)) = σ: {mix(spectral_ensemble(sigma)).allclose(sigma)}")

    # 3. Очищение
    psi = purify(sigma)
    restored = trace_right(MixedState.pure(psi))
    print(f"\n✓ Очищение: |Ψ⟩ размерности {psi.dim}, структура {psi.dims}")
    print(f"  Tr₂|Ψ⟩⟨Ψ| = σ: {restored.allclose(sigma)}")

    # 4. Тензорное произведение и SWAP
    rho_ab = product(MixedState.basis_state(2, 0), MixedState.uniform(3))
    print(f"\n✓ ρ_A ⊗ ρ_B: структура {rho_ab.dims}")
    print(f"  Tr_A = ρ_B: {trace_left(rho_ab).allclose(MixedState.uniform(3))}")
    print(f"  SWAP: структура {swap(rho_ab).dims}")


def demo_separability():
    """
    Демонстрация проверки сепарабельности на состояниях Вернера
    """
    print("\n" + "=" * 70)
    print("ДЕМОНСТРАЦИЯ 2: Сепарабельность состояний Вернера")
    print("=" * 70)

    singlet = np.array([0, 1, -1, 0]) / np.sqrt(2)

    print(f"\n{'p':>6s} | {'сепарабельно':>12s}")
    print("-" * 24)
    for p in [0.0, 0.2, 1 / 3, 0.5, 1.0]:
        matrix = p * np.outer(singlet, singlet) + (1 - p) * np.eye(4) / 4
        werner = MixedState.from_matrix(matrix, dims=(2, 2))
        verdict = "да" if is_separable(werner, use_sdp=False) else "нет"
        print(f"{p:6.3f} | {verdict:>12s}")


def demo_hypothesis_testing():
    """
    Демонстрация β_ε(ρ‖S): SDP против замкнутой формы
    """
    print("\n" + "=" * 70)
    print("ДЕМОНСТРАЦИЯ 3: Оптимальная проверка гипотез")
    print("=" * 70)

    rho = MixedState.basis_state(2, 0)
    sigma = MixedState.uniform(2)
    epsilon = 0.05

    print(f"\nρ = |0⟩⟨0|, σ = I/2, ε = {epsilon}")
    print(f"  Trace distance: {trace_distance(rho, sigma):.4f}")

    result = solve_hypothesis_test(rho, epsilon, [sigma])
    closed = neyman_pearson_rate(rho, sigma, epsilon)

    print(f"\n✓ SDP:               β = {result.value:.6f} (status: {result.status})")
    print(f"✓ Нейман–Пирсон:     β = {closed:.6f}")
    print(f"✓ Ожидаемое (1-ε)/2:  β = {(1 - epsilon) / 2:.6f}")
    print(f"\nОптимальный тест T:\n{np.round(result.measurement.matrix.real, 4)}")

    print(f"\n{'ε':>6s} | {'β_ε':>10s}")
    print("-" * 20)
    for eps in np.linspace(0.0, 1.0, 6):
        print(f"{eps:6.2f} | {neyman_pearson_rate(rho, sigma, eps):10.6f}")


def demo_stein_exponent():
    """
    Демонстрация показателя Штейна: -log β_n / n → D(ρ‖σ)
    """
    print("\n" + "=" * 70)
    print("ДЕМОНСТРАЦИЯ 4: Показатель Штейна")
    print("=" * 70)

    rho = MixedState.of_classical([0.9, 0.1])
    sigma = MixedState.uniform(2)
    theory = ProductResourceTheory([sigma])

    sequence = rate_sequence(rho, 0.1, theory, [1, 2, 3, 4, 5, 6], closed_form=True)

    print(f"\n{'n':>3s} | {'β_n':>12s} | {'-log β_n / n':>12s}")
    print("-" * 34)
    for n, beta, exponent in zip(sequence.block_sizes, sequence.rates, sequence.exponents):
        print(f"{n:3d} | {beta:12.6e} | {exponent:12.6f}")

    print(f"\n✓ Подогнанный показатель: {sequence.fitted_exponent():.6f}")
    print(f"✓ D(ρ‖σ):                 {relative_entropy(rho, sigma):.6f}")
    print("  (на малых n поправки порядка √n ещё заметны)")


if __name__ == "__main__":
    demo_state_algebra()
    demo_separability()
    demo_hypothesis_testing()
    demo_stein_exponent()
