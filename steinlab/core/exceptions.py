"""
Ошибки нарушения инвариантов

Все проверки выполняются на границе конструирования (fail fast).
Ошибки физичности наследуются от ValueError.
"""


class InvalidState(ValueError):
    """Матрица не эрмитова, не PSD или след ≠ 1 (или вектор не нормирован)"""


class DimensionMismatch(ValueError):
    """Несовместимые размерности в тензорных операциях или частичном следе"""


class InvalidDistribution(ValueError):
    """Отрицательные веса или сумма весов ≠ 1"""


class InvalidMeasurement(ValueError):
    """Оператор измерения не эрмитов или не лежит в [0, I]"""


class SeparabilityUndecided(RuntimeError):
    """Ни один из реализованных критериев не решил вопрос о сепарабельности"""
