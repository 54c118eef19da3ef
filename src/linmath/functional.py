"""
Functional — Операции Vector/Matrix в форме свободных функций

Каждая функция делегирует одноимённому методу и имеет ту же семантику:
    dot(a, b) == a.dot(b)
    transpose(m) == m.transpose()
"""

from typing import Any

from src.linmath.matrix import Matrix
from src.linmath.vector import Vector


def dot(a: Vector, b: Vector) -> Any:
    """Скалярное произведение: Σ a[i] * b[i]."""
    return a.dot(b)


def cross(a: Vector, b: Vector) -> Vector:
    """Векторное произведение (только 3D векторы)."""
    return a.cross(b)


def magnitude(v: Vector) -> float:
    """Длина вектора."""
    return v.magnitude()


def normalized(v: Vector) -> Vector:
    """Единичный вектор; нулевой вектор возвращается без изменений."""
    return v.normalized()


def distance(a: Vector, b: Vector) -> float:
    """Расстояние: magnitude(a - b) (только floating T)."""
    return type(a).distance(a, b)


def clamp(v: Vector, min_value: Any, max_value: Any) -> Vector:
    """Покомпонентное ограничение диапазоном [min_value, max_value]."""
    return v.clamp(min_value, max_value)


def lerp(start: Vector, end: Vector, t: Any) -> Vector:
    """Линейная интерполяция (t не ограничивается)."""
    return Vector.lerp(start, end, t)


def reflect(v: Vector, normal: Vector) -> Vector:
    """Отражение относительно единичной нормали."""
    return v.reflect(normal)


def transpose(m: Matrix) -> Matrix:
    return m.transpose()


def transform(m: Matrix, v: Vector) -> Vector:
    """Применение матрицы к вектору: Matrix[T, R, C] x Vector[T, C] → Vector[T, R]."""
    return m.transform(v)


def matmul(a: Matrix, b: Matrix) -> Matrix:
    """Матричное произведение: a.cols == b.rows."""
    return a.matmul(b)
