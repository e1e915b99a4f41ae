"""
Автоматическое тестирование всех сценариев использования SteinLab++
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import numpy as np
from steinlab.core.states import Ket, MixedState
from steinlab.core.tensor import product, trace_left, trace_right, swap, assoc, assoc_inv
from steinlab.core.spectral import purity, spectrum
from steinlab.core.purification import purify
from steinlab.core.random import random_mixed_state
from steinlab.ensembles.ensemble import Ensemble, mix, spectral_ensemble, mixes_to_pure
from steinlab.entanglement.separability import is_separable
from steinlab.hypothesis.rate import (
    optimal_hypothesis_rate,
    neyman_pearson_rate,
    singleton_decomposition_rate
)
from steinlab.hypothesis.resource import ProductResourceTheory
from steinlab.hypothesis.stein import rate_sequence
from steinlab.metrics.distance import relative_entropy


def print_separator(title):
    """Красивый разделитель"""
    print("\n" + "="*80)
    print(f"  {title}")
    print("="*80)


def report(tests):
    """Вывод таблицы результатов; True, если все проверки прошли"""
    for status, name, info in tests:
        print(f"{status} {name:45s} | {info}")
    passed = sum(1 for t in tests if t[0] == "✅")
    print(f"\nРезультат: {passed}/{len(tests)} тестов пройдено")
    return passed == len(tests)


def check(tests, name, condition, info=""):
    tests.append(("✅" if condition else "❌", name, info))


def test_state_algebra():
    """Тест 1: Смеси, чистота, очищение"""
    print_separator("ТЕСТ 1: Алгебра состояний")

    tests = []

    rho = mix(Ensemble([Ket.basis(2, 0), Ket.basis(2, 1)], [0.5, 0.5]))
    check(tests, "½|0⟩⟨0| + ½|1⟩⟨1| = I/2", rho.allclose(MixedState.uniform(2)),
          f"purity = {purity(rho):.4f}")

    for n in [2, 3, 5]:
        check(tests, f"Tr((I/{n})²) = 1/{n}", np.isclose(purity(MixedState.uniform(n)), 1 / n))

    sigma = random_mixed_state(3, seed=42)
    check(tests, "mix(spectral_ensemble(σ)) = σ", mix(spectral_ensemble(sigma)).allclose(sigma),
          f"spectrum = {np.round(spectrum(sigma).weights, 3)}")

    for name, state in [("I/2", MixedState.uniform(2)),
                        ("diag(0.7, 0.3, 0)", MixedState.of_classical([0.7, 0.3, 0.0])),
                        ("random rank 2", random_mixed_state(3, rank=2, seed=7))]:
        restored = trace_right(MixedState.pure(purify(state)))
        check(tests, f"Tr₂|Ψ⟩⟨Ψ| = ρ ({name})", restored.allclose(state))

    psi = Ket.basis(2, 0)
    check(tests, "Смесь |0⟩ и |0⟩ чистая", mixes_to_pure(Ensemble([psi, psi], [0.3, 0.7]), psi))

    return report(tests)


def test_tensor_identities():
    """Тест 2: Частичный след, SWAP, ассоциатор"""
    print_separator("ТЕСТ 2: Тензорные тождества")

    tests = []

    rho1 = random_mixed_state(2, seed=1)
    rho2 = random_mixed_state(3, seed=2)
    rho12 = product(rho1, rho2)

    check(tests, "Tr_A(ρ₁ ⊗ ρ₂) = ρ₂", trace_left(rho12).allclose(rho2))
    check(tests, "Tr_B(ρ₁ ⊗ ρ₂) = ρ₁", trace_right(rho12).allclose(rho1))
    check(tests, "SWAP ∘ SWAP = id", swap(swap(rho12)).allclose(rho12), f"dims = {swap(rho12).dims}")

    rho123 = MixedState.from_matrix(random_mixed_state(12, seed=3).matrix, dims=((2, 3), 2))
    check(tests, "assoc⁻¹ ∘ assoc = id", assoc_inv(assoc(rho123)).allclose(rho123),
          f"dims = {assoc(rho123).dims}")
    check(tests, "Tr_{AB} ∘ assoc = Tr_{AB}",
          trace_left(trace_left(assoc(rho123))).allclose(trace_left(rho123)))

    return report(tests)


def test_separability():
    """Тест 3: Сепарабельность"""
    print_separator("ТЕСТ 3: Сепарабельность")

    tests = []

    singlet = np.array([0, 1, -1, 0]) / np.sqrt(2)
    for p, expected in [(0.2, True), (0.5, False)]:
        matrix = p * np.outer(singlet, singlet) + (1 - p) * np.eye(4) / 4
        werner = MixedState.from_matrix(matrix, dims=(2, 2))
        verdict = is_separable(werner, use_sdp=False)
        check(tests, f"Werner p={p}", verdict == expected, f"separable = {verdict}")

    bell = MixedState.pure(Ket([1, 0, 0, 1], dims=(2, 2)))
    check(tests, "Bell-состояние запутано", not is_separable(bell, use_sdp=False))

    return report(tests)


def test_hypothesis_rates():
    """Тест 4: Оптимальная проверка гипотез"""
    print_separator("ТЕСТ 4: β_ε(ρ‖S)")

    tests = []

    rho = MixedState.basis_state(2, 0)
    sigma = MixedState.uniform(2)

    closed = neyman_pearson_rate(rho, sigma, 0.05)
    check(tests, "Нейман–Пирсон: β = 0.475", np.isclose(closed, 0.475), f"β = {closed:.6f}")

    sdp = optimal_hypothesis_rate(rho, 0.05, [sigma])
    check(tests, "SDP: β = 0.475", np.isclose(sdp, 0.475, atol=1e-3), f"β = {sdp:.6f}")

    check(tests, "β_ε(ρ‖∅) = 0", optimal_hypothesis_rate(rho, 0.05, []) == 0.0)

    rates = [neyman_pearson_rate(rho, sigma, eps) for eps in np.linspace(0, 1, 11)]
    check(tests, "β_ε не возрастает по ε", all(b <= a + 1e-9 for a, b in zip(rates, rates[1:])))

    alternatives = [sigma, MixedState.basis_state(2, 1)]
    decomposed = singleton_decomposition_rate(rho, 0.05, alternatives, closed_form=True)
    joint = optimal_hypothesis_rate(rho, 0.05, alternatives)
    check(tests, "sup_σ β(ρ‖{σ}) = β(ρ‖S)", np.isclose(decomposed, joint, atol=1e-3),
          f"{decomposed:.6f} vs {joint:.6f}")

    return report(tests)


def test_stein_exponent():
    """Тест 5: Показатель Штейна"""
    print_separator("ТЕСТ 5: Показатель Штейна")

    tests = []

    rho = MixedState.basis_state(2, 0)
    sigma = MixedState.uniform(2)
    sequence = rate_sequence(rho, 0.05, ProductResourceTheory([sigma]), [1, 2, 3, 4, 5],
                             closed_form=True)
    exponent = sequence.fitted_exponent()
    divergence = relative_entropy(rho, sigma)

    check(tests, "Подогнанный показатель = D(ρ‖σ)", np.isclose(exponent, divergence, atol=1e-6),
          f"{exponent:.6f} vs {divergence:.6f}")

    return report(tests)


def main():
    """Запуск всех тестов"""
    print_separator("SteinLab++ | ПОЛНОЕ ТЕСТИРОВАНИЕ СЦЕНАРИЕВ")

    results = []

    test_functions = [
        ("Алгебра состояний", test_state_algebra),
        ("Тензорные тождества", test_tensor_identities),
        ("Сепарабельность", test_separability),
        ("Проверка гипотез", test_hypothesis_rates),
        ("Показатель Штейна", test_stein_exponent),
    ]

    for name, test_func in test_functions:
        try:
            passed = test_func()
            results.append((name, passed))
        except Exception as e:
            print(f"\n❌ КРИТИЧЕСКАЯ ОШИБКА в тесте '{name}': {e}")
            import traceback
            traceback.print_exc()
            results.append((name, False))

    # Итоговый отчет
    print_separator("ИТОГОВЫЙ ОТЧЕТ")

    for name, passed in results:
        status = "✅ PASSED" if passed else "❌ FAILED"
        print(f"{status:12s} | {name}")

    total_passed = sum(1 for _, p in results if p)
    total_tests = len(results)

    print(f"\n{'='*80}")
    print(f"Итого: {total_passed}/{total_tests} тестов пройдено")

    if total_passed == total_tests:
        print("🎉 ВСЕ ТЕСТЫ УСПЕШНО ПРОЙДЕНЫ!")
    else:
        print("⚠️  Некоторые тесты провалились. Требуется доработка.")

    print("="*80 + "\n")

    return total_passed == total_tests


if __name__ == '__main__':
    success = main()
    sys.exit(0 if success else 1)
