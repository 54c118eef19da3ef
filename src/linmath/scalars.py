"""
Scalars — Скалярные примитивы для Vector/Matrix

Модуль содержит всё, что векторные и матричные типы знают о скалярах:
- Epsilon-параметры для приближённых сравнений (is_close)
- Распознавание скалярного операнда в операторах
- Проверка finite (не NaN, не Inf)
- Точное целочисленное деление с усечением к нулю
- Clamp с семантикой std::clamp

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Арифметика Vector/Matrix точная: epsilon используется только в is_close
2. Равенство (==) никогда не использует толерантность
3. Все функции детерминированы и не имеют побочных эффектов
"""

import math
import numbers
from typing import Any, Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Относительная толерантность для is_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность для is_close (сравнения около нуля)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# СКАЛЯРНЫЕ ТИПЫ
# =============================================================================


def is_scalar_type(value: Any) -> bool:
    """
    Проверка, может ли класс быть скалярным типом T контейнера.

    Допустимы вещественные числовые классы (int, float, Fraction, ...).
    bool исключён: True + True не является осмысленной компонентой.

    Args:
        value: Проверяемый объект

    Returns:
        True если value — класс вещественных чисел

    Examples:
        >>> is_scalar_type(float)
        True
        >>> is_scalar_type(bool)
        False
        >>> is_scalar_type(complex)
        False
    """
    if not isinstance(value, type):
        return False
    return issubclass(value, numbers.Real) and not issubclass(value, bool)


def is_floating_type(scalar_type: type) -> bool:
    """Поддерживает ли скалярный тип семантику sqrt (magnitude, normalize)."""
    return issubclass(scalar_type, float)


def is_scalar(value: Any) -> bool:
    """
    Проверка, является ли операнд скаляром.

    Используется операторами для выбора между vector-vector
    и vector-scalar формой.
    """
    return isinstance(value, numbers.Real)


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли значение конечным (не NaN, не Inf).

    Args:
        value: Проверяемое значение (int, float, Fraction)

    Returns:
        True если значение finite
    """
    return math.isfinite(value)


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение скаляров с учётом машинной точности.

    Алгоритм (как math.isclose):
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Args:
        a: Первое значение
        b: Второе значение
        rel_tol: Относительная толерантность (default: 1e-9)
        abs_tol: Абсолютная толерантность (default: 1e-12)

    Returns:
        True если значения близки

    Raises:
        ValueError: Если толерантность отрицательная (из math.isclose)

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(0.0, 1e-13)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


# =============================================================================
# ДЕЛЕНИЕ
# =============================================================================


def divide_scalar(a: Any, b: Any) -> Any:
    """
    Деление компоненты на компоненту.

    Для целых операндов деление точное, с усечением к нулю
    (как целочисленное деление в C), без промежуточного float.
    Для остальных типов — обычное a / b.

    Raises:
        ZeroDivisionError: Если b == 0

    Examples:
        >>> divide_scalar(-7, 2)
        -3
        >>> divide_scalar(2**53 + 1, 1)
        9007199254740993
        >>> divide_scalar(7.0, 2.0)
        3.5
    """
    if isinstance(a, numbers.Integral) and isinstance(b, numbers.Integral):
        quotient = abs(a) // abs(b)
        return -quotient if (a < 0) != (b < 0) else quotient
    return a / b


# =============================================================================
# CLAMP
# =============================================================================


def clamp_scalar(value: Any, min_value: Any, max_value: Any) -> Any:
    """
    Ограничение значения диапазоном [min_value, max_value].

    Семантика std::clamp: сравнения только через "<", граница
    возвращается как есть. При min_value > max_value результат
    не определён (проверка не выполняется).

    Examples:
        >>> clamp_scalar(5.0, 0.0, 10.0)
        5.0
        >>> clamp_scalar(-1.0, 0.0, 10.0)
        0.0
        >>> clamp_scalar(15.0, 0.0, 10.0)
        10.0
    """
    if value < min_value:
        return min_value
    if max_value < value:
        return max_value
    return value
