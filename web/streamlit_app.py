"""
SteinLab++ - Интерактивный веб-интерфейс для проверки гипотез о квантовых состояниях
"""

import streamlit as st
import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import pandas as pd
import sys
import os

# Добавляем путь к модулю
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from steinlab.core.states import MixedState
from steinlab.core.spectral import spectrum, purity, von_neumann_entropy
from steinlab.core.random import random_mixed_state
from steinlab.hypothesis.rate import solve_hypothesis_test, neyman_pearson_rate
from steinlab.hypothesis.resource import ProductResourceTheory
from steinlab.hypothesis.stein import rate_sequence
from steinlab.metrics.distance import trace_distance, fidelity, relative_entropy
from steinlab.metrics.validation import validate_measurement


# Конфигурация страницы
st.set_page_config(
    page_title="SteinLab++ | Quantum Hypothesis Testing",
    page_icon="⚛️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Кастомные стили
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 1rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        text-align: center;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)


STATE_TYPES = ['|0⟩⟨0|', 'Максимально смешанное', 'Диагональное', 'Случайное']


def create_state(state_type, params, dim):
    """Создать состояние по типу и параметрам"""
    if state_type == '|0⟩⟨0|':
        return MixedState.basis_state(dim, 0)

    elif state_type == 'Максимально смешанное':
        return MixedState.uniform(dim)

    elif state_type == 'Диагональное':
        p = params.get('p', 0.9)
        weights = np.full(dim, (1 - p) / (dim - 1))
        weights[0] = p
        return MixedState.of_classical(weights)

    elif state_type == 'Случайное':
        return random_mixed_state(dim, seed=params.get('seed', None))

    return None


def state_controls(label, key, dim, default_index):
    """Виджеты выбора состояния в боковой панели"""
    state_type = st.selectbox(f"Состояние {label}", STATE_TYPES, index=default_index, key=f"{key}_type")
    params = {}
    if state_type == 'Диагональное':
        params['p'] = st.slider(f"Вес |0⟩ для {label}", 0.0, 1.0, 0.9, 0.01, key=f"{key}_p")
    elif state_type == 'Случайное':
        params['seed'] = st.number_input(f"Seed для {label}", 0, 10000, 42, key=f"{key}_seed")
    return create_state(state_type, params, dim)


def plot_density_matrix(rho, title):
    """Визуализация матрицы плотности (действительная и мнимая части)"""
    fig = make_subplots(
        rows=1, cols=2,
        subplot_titles=('Действительная часть', 'Мнимая часть'),
        horizontal_spacing=0.15
    )

    fig.add_trace(
        go.Heatmap(z=np.real(rho.matrix), colorscale='RdBu', zmid=0,
                   colorbar=dict(x=0.45, len=0.9)),
        row=1, col=1
    )
    fig.add_trace(
        go.Heatmap(z=np.imag(rho.matrix), colorscale='RdBu', zmid=0,
                   colorbar=dict(x=1.02, len=0.9)),
        row=1, col=2
    )

    fig.update_layout(height=350, title_text=title, title_x=0.5, showlegend=False)
    return fig


def plot_rate_vs_epsilon(rho, sigma):
    """График β_ε(ρ‖{σ}) в зависимости от ε"""
    epsilons = np.linspace(0.0, 1.0, 51)
    rates = [neyman_pearson_rate(rho, sigma, eps) for eps in epsilons]

    fig = go.Figure(data=[
        go.Scatter(x=epsilons, y=rates, mode='lines', name='β_ε', line=dict(width=3))
    ])
    fig.update_layout(
        height=400,
        title_text="Оптимальная ошибка второго рода",
        xaxis_title="ε (ошибка первого рода)",
        yaxis_title="β_ε",
        title_x=0.5
    )
    return fig


def plot_stein_sequence(sequence, divergence):
    """-log β_n / n в зависимости от n и предел D(ρ‖σ)"""
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=sequence.block_sizes, y=sequence.exponents,
                             mode='lines+markers', name='-log β_n / n'))
    if np.isfinite(divergence):
        fig.add_hline(y=divergence, line_dash='dash', annotation_text='D(ρ‖σ)')
    fig.update_layout(
        height=400,
        title_text="Показатель Штейна",
        xaxis_title="n (число копий)",
        yaxis_title="-log β_n / n",
        title_x=0.5
    )
    return fig


def main():
    st.markdown('<div class="main-header">⚛️ SteinLab++ Quantum Hypothesis Testing</div>', unsafe_allow_html=True)
    st.markdown('<div class="sub-header">Оптимальное различение квантовых состояний и показатель Штейна</div>', unsafe_allow_html=True)

    # Боковая панель
    with st.sidebar:
        st.header("⚙️ Панель управления")

        dim = st.selectbox("Размерность системы", [2, 3, 4], index=0)

        st.subheader("Гипотезы")
        rho = state_controls("ρ", "rho", dim, 0)
        sigma = state_controls("σ", "sigma", dim, 1)

        epsilon = st.slider("Допустимая ошибка ε", 0.0, 1.0, 0.05, 0.01)

        st.markdown("---")

        st.subheader("📊 Показатель Штейна")
        max_copies = st.slider("Максимальное число копий n", 2, 8, 5)

        run_button = st.button("🚀 Решить SDP", type="primary", use_container_width=True)

    # Метрики в карточках
    st.markdown("### 📈 Ключевые метрики")

    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(label="Trace distance", value=f"{trace_distance(rho, sigma):.4f}")
    with col2:
        st.metric(label="Fidelity", value=f"{fidelity(rho, sigma):.4f}")
    with col3:
        divergence = relative_entropy(rho, sigma)
        st.metric(label="D(ρ‖σ)", value=f"{divergence:.4f}" if np.isfinite(divergence) else "∞")
    with col4:
        st.metric(label="β_ε (замкнутая форма)", value=f"{neyman_pearson_rate(rho, sigma, epsilon):.6f}")

    tabs = st.tabs(["📊 Состояния", "📉 β от ε", "🔁 Показатель Штейна"])

    with tabs[0]:
        col_a, col_b = st.columns(2)
        for column, state, label in [(col_a, rho, "ρ"), (col_b, sigma, "σ")]:
            with column:
                st.plotly_chart(plot_density_matrix(state, f"Матрица {label}"), width='stretch')
                info_df = pd.DataFrame({
                    'Величина': ['Чистота', 'Энтропия (бит)', 'Спектр'],
                    'Значение': [
                        f"{purity(state):.4f}",
                        f"{von_neumann_entropy(state):.4f}",
                        ", ".join(f"{w:.3f}" for w in sorted(spectrum(state).weights, reverse=True))
                    ]
                })
                st.dataframe(info_df, width='stretch')

    with tabs[1]:
        st.plotly_chart(plot_rate_vs_epsilon(rho, sigma), width='stretch')

        if run_button:
            with st.spinner('🔬 Решается SDP...'):
                try:
                    result = solve_hypothesis_test(rho, epsilon, [sigma])
                    st.session_state['sdp_result'] = result
                except Exception as e:
                    st.error(f"❌ Ошибка при решении SDP: {e}")

        if 'sdp_result' in st.session_state:
            result = st.session_state['sdp_result']
            report = validate_measurement(result.measurement.matrix)
            st.success(f"✅ SDP: β = {result.value:.6f} (status: {result.status})")
            st.markdown("**Оптимальный тест T**")
            st.dataframe(pd.DataFrame(np.real(result.measurement.matrix)), width='stretch')
            st.caption(f"Спектр T ∈ [{report['min_eigenvalue']:.2e}, {report['max_eigenvalue']:.4f}]")

    with tabs[2]:
        theory = ProductResourceTheory([sigma])
        sequence = rate_sequence(rho, epsilon, theory, list(range(1, max_copies + 1)), closed_form=True)

        st.plotly_chart(plot_stein_sequence(sequence, divergence), width='stretch')

        stats_df = pd.DataFrame({
            'n': sequence.block_sizes,
            'β_n': [f"{b:.6e}" for b in sequence.rates],
            '-log β_n / n': [f"{e:.6f}" for e in sequence.exponents]
        })
        st.dataframe(stats_df, width='stretch')

    # Информация о проекте
    st.markdown("---")
    with st.expander("ℹ️ О проекте SteinLab++"):
        st.markdown("""
        **SteinLab++** - библиотека алгебры смешанных состояний и оптимальной проверки гипотез.

        **Возможности:**
        - Матрицы плотности, тензорная алгебра, частичный след, очищение
        - Ансамбли и смешивание, проверка сепарабельности
        - β_ε(ρ‖S) через SDP (CVXPY) и замкнутая форма Неймана–Пирсона
        - Оценка показателя Штейна на конечных блоках

        **Технологии:**
        - NumPy для численных вычислений
        - CVXPY для полуопределённого программирования
        - Plotly для интерактивных графиков
        - Streamlit для веб-интерфейса
        """)


if __name__ == '__main__':
    main()
