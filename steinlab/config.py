"""
Единая политика численных допусков SteinLab++

Все проверки (эрмитовость, положительность, нормировка, равенства
алгебраических тождеств) используют один и тот же допуск TOLERANCE.
"""

import os

# Допуск для проверок эрмитовости / PSD / следа
TOLERANCE = 1e-9

# Допуск для значений, полученных численным SDP-решателем
SDP_TOLERANCE = 1e-4

# Решатель CVXPY (None = выбор по умолчанию)
DEFAULT_SOLVER = os.environ.get("STEINLAB_SDP_SOLVER") or None
