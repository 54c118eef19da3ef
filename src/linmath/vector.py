"""
Vector — Вектор фиксированной размерности

Generic контейнер Vector[T, N]: упорядоченный набор ровно N скаляров типа T.

Параметризация создаёт (и кэширует) отдельный класс на каждую пару (T, N):
    Vec3 = Vector[float, 3]
    Vector[float, 3] is Vec3  # True

Операции:
- Поэлементные +, -, *, / (vector-vector и vector-scalar), чистые и
  compound-assignment (+=, -=, *=, /=) формы
- dot, clamp, lerp, reflect, отрицание, точное равенство
- magnitude, normalized, normalize, distance — только для floating T
- cross — только для N == 3

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. N фиксирован при параметризации и никогда не меняется
2. Все компоненты приводятся к T при записи
3. Операнды другой формы не комбинируются (NotImplemented → TypeError)
4. Компоненты — только числа: строки не разбираются, даже если T("1") работает
5. Единственная защитная ветка — нулевая длина в normalized()
"""

import math
import operator
from itertools import islice
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional

from pydantic_core import core_schema

from src.linmath.scalars import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    clamp_scalar,
    divide_scalar,
    is_close,
    is_scalar,
    is_valid_float,
)
from src.linmath.shapes import ShapeMismatchError, VectorShape

# Кэш параметризованных классов: VectorShape → класс
_VECTOR_TYPES: dict[VectorShape, type["Vector"]] = {}


# =============================================================================
# BASE VECTOR
# =============================================================================


class Vector:
    """
    Generic вектор фиксированной размерности.

    Непараметризованный Vector нельзя инстанцировать: используйте
    Vector[T, N] или алиасы Vec2/Vec3/Vec4.

    Конструктор принимает компоненты позиционно. Если значений меньше N,
    оставшиеся компоненты равны нулю; лишние значения отбрасываются:
        Vec4(1, 2) == Vec4(1, 2, 0, 0)
    """

    __slots__ = ("_data",)

    shape: ClassVar[Optional[VectorShape]] = None
    scalar_type: ClassVar[type]
    size: ClassVar[int]

    def __class_getitem__(cls, params: Any) -> type["Vector"]:
        if cls.shape is not None:
            raise TypeError(f"{cls.__name__} is already parametrized")
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError("Vector must be parametrized as Vector[T, N]")
        scalar_type, size = params
        return vector_type(scalar_type, size)

    def __init__(self, *values: Any) -> None:
        if self.shape is None:
            raise TypeError("Vector is generic: parametrize it first, e.g. Vector[float, 3]")
        self._data = self._padded(values)

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if not is_scalar(value):
            raise TypeError(
                f"Vector[{cls.shape.describe()}] components must be numbers, "
                f"got {type(value).__name__}"
            )
        return cls.scalar_type(value)

    @classmethod
    def _padded(cls, values: Iterable[Any]) -> list:
        data = [cls.scalar_type(0)] * cls.size
        for i, value in enumerate(islice(values, cls.size)):
            data[i] = cls._coerce(value)
        return data

    @classmethod
    def _from_values(cls, values: Iterable[Any]) -> "Vector":
        # values содержит ровно N элементов
        instance = cls.__new__(cls)
        instance._data = [cls._coerce(v) for v in values]
        return instance

    @classmethod
    def zero(cls) -> "Vector":
        """Нулевой вектор."""
        return cls()

    @classmethod
    def from_iterable(cls, values: Iterable[Any]) -> "Vector":
        """
        Создание вектора из произвольного iterable.

        Правило то же, что у конструктора: недостающие компоненты
        равны нулю, лишние отбрасываются.
        """
        if cls.shape is None:
            raise TypeError("Vector is generic: parametrize it first, e.g. Vector[float, 3]")
        instance = cls.__new__(cls)
        instance._data = cls._padded(iter(values))
        return instance

    def copy(self) -> "Vector":
        """Независимая копия значения."""
        return self._from_values(self._data)

    # -------------------------------------------------------------------------
    # Поэлементный комбинатор
    # -------------------------------------------------------------------------

    def _same_shape(self, other: Any) -> bool:
        return isinstance(other, Vector) and other.shape == self.shape

    def _require_same_shape(self, other: Any, operation: str) -> None:
        if not self._same_shape(other):
            other_name = type(other).__name__
            raise ShapeMismatchError(
                f"{operation} requires Vector[{self.shape.describe()}], got {other_name}"
            )

    def _operands(self, other: Any) -> Optional[Iterable[tuple]]:
        if self._same_shape(other):
            return zip(self._data, other._data)
        if is_scalar(other):
            scalar = self.scalar_type(other)
            return ((x, scalar) for x in self._data)
        return None

    def _combine(self, other: Any, op: Callable[[Any, Any], Any]) -> "Vector":
        pairs = self._operands(other)
        if pairs is None:
            return NotImplemented
        return self._from_values(op(a, b) for a, b in pairs)

    def _combine_inplace(self, other: Any, op: Callable[[Any, Any], Any]) -> "Vector":
        pairs = self._operands(other)
        if pairs is None:
            return NotImplemented
        self._data = [self._coerce(op(a, b)) for a, b in pairs]
        return self

    def __add__(self, other: Any) -> "Vector":
        return self._combine(other, operator.add)

    def __sub__(self, other: Any) -> "Vector":
        return self._combine(other, operator.sub)

    def __mul__(self, other: Any) -> "Vector":
        return self._combine(other, operator.mul)

    def __truediv__(self, other: Any) -> "Vector":
        return self._combine(other, divide_scalar)

    def __radd__(self, other: Any) -> "Vector":
        if not is_scalar(other):
            return NotImplemented
        return self._combine(other, operator.add)

    def __rmul__(self, other: Any) -> "Vector":
        if not is_scalar(other):
            return NotImplemented
        return self._combine(other, operator.mul)

    def __iadd__(self, other: Any) -> "Vector":
        return self._combine_inplace(other, operator.add)

    def __isub__(self, other: Any) -> "Vector":
        return self._combine_inplace(other, operator.sub)

    def __imul__(self, other: Any) -> "Vector":
        return self._combine_inplace(other, operator.mul)

    def __itruediv__(self, other: Any) -> "Vector":
        return self._combine_inplace(other, divide_scalar)

    def __neg__(self) -> "Vector":
        return self * -1

    # -------------------------------------------------------------------------
    # Векторные операции
    # -------------------------------------------------------------------------

    def dot(self, other: "Vector") -> Any:
        """
        Скалярное произведение: Σ a[i] * b[i].

        Args:
            other: Вектор той же формы

        Returns:
            Скаляр типа T (для N == 0 — T(0))

        Raises:
            ShapeMismatchError: Если other другой формы
        """
        self._require_same_shape(other, "dot")
        total = self.scalar_type(0)
        for a, b in zip(self._data, other._data):
            total += a * b
        return self.scalar_type(total)

    def clamp(self, min_value: Any, max_value: Any) -> "Vector":
        """
        Ограничение каждой компоненты диапазоном [min_value, max_value].

        При min_value > max_value результат не определён.
        """
        lo, hi = self._coerce(min_value), self._coerce(max_value)
        return self._from_values(clamp_scalar(x, lo, hi) for x in self._data)

    @staticmethod
    def lerp(start: "Vector", end: "Vector", t: Any) -> "Vector":
        """
        Линейная интерполяция: start + (end - start) * t.

        t не ограничивается [0, 1]: за пределами выполняется экстраполяция.
        """
        return start + (end - start) * t

    def reflect(self, normal: "Vector") -> "Vector":
        """
        Отражение относительно нормали: v - normal * (2 * dot(v, normal)).

        normal должна быть единичной длины; повторная нормализация
        не выполняется.
        """
        return self - normal * (2 * self.dot(normal))

    # -------------------------------------------------------------------------
    # Приближённые сравнения
    # -------------------------------------------------------------------------

    def is_close(
        self,
        other: "Vector",
        rel_tol: float = EPS_FLOAT_COMPARE_REL,
        abs_tol: float = EPS_FLOAT_COMPARE_ABS,
    ) -> bool:
        """
        Покомпонентное сравнение с толерантностью.

        Единственное приближённое сравнение в библиотеке: == всегда точное.
        """
        self._require_same_shape(other, "is_close")
        return all(
            is_close(a, b, rel_tol=rel_tol, abs_tol=abs_tol)
            for a, b in zip(self._data, other._data)
        )

    def is_finite(self) -> bool:
        """Все компоненты конечны (нет NaN/Inf)."""
        return all(is_valid_float(x) for x in self._data)

    # -------------------------------------------------------------------------
    # Протоколы Python
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not self._same_shape(other):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __setitem__(self, index: int, value: Any) -> None:
        if isinstance(index, slice):
            raise TypeError("Vector components must be assigned one at a time")
        self._data[index] = self._coerce(value)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def to_list(self) -> list:
        return list(self._data)

    def to_tuple(self) -> tuple:
        return tuple(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(x) for x in self._data)})"

    def __str__(self) -> str:
        return f"({', '.join(str(x) for x in self._data)})"

    # -------------------------------------------------------------------------
    # Pydantic
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        if cls.shape is None:
            raise TypeError("Vector is generic: annotate fields with Vector[T, N]")
        return core_schema.no_info_plain_validator_function(
            cls._validate_field,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_list()
            ),
        )

    @classmethod
    def _validate_field(cls, value: Any) -> "Vector":
        if isinstance(value, cls):
            return value
        if isinstance(value, Vector):
            raise ValueError(
                f"expected Vector[{cls.shape.describe()}], got {type(value).__name__}"
            )
        if isinstance(value, (str, bytes)):
            raise ValueError(f"expected a sequence of numbers, got {type(value).__name__}")
        try:
            return cls.from_iterable(value)
        except TypeError as e:
            raise ValueError(f"expected a sequence of numbers: {e}") from e


# =============================================================================
# OPTIONAL OPERATIONS
# =============================================================================


class _MetricOps:
    """magnitude/normalize/distance: только для floating T."""

    __slots__ = ()

    def magnitude(self) -> float:
        """Длина вектора: sqrt(dot(v, v))."""
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vector":
        """
        Вектор единичной длины того же направления.

        Для нулевого вектора возвращается копия без изменений
        (защита от деления на ноль).
        """
        mag = self.magnitude()
        if mag > 0:
            return self / mag
        return self.copy()

    def normalize(self) -> "Vector":
        """Нормализация на месте; возвращает self."""
        self._data = self.normalized()._data
        return self

    @staticmethod
    def distance(a: "Vector", b: "Vector") -> float:
        """Расстояние между точками: magnitude(a - b)."""
        return (a - b).magnitude()


class _CrossOps:
    """Векторное произведение: только для N == 3."""

    __slots__ = ()

    def cross(self, other: "Vector") -> "Vector":
        """
        Векторное произведение в 3D.

        Raises:
            ShapeMismatchError: Если other другой формы
        """
        self._require_same_shape(other, "cross")
        ax, ay, az = self._data
        bx, by, bz = other._data
        return self._from_values(
            (
                ay * bz - az * by,
                az * bx - ax * bz,
                ax * by - ay * bx,
            )
        )


# =============================================================================
# PARAMETRIZATION
# =============================================================================


def vector_type(scalar_type: type, size: int) -> type[Vector]:
    """
    Параметризованный класс Vector[scalar_type, size].

    Классы кэшируются: повторный вызов с теми же параметрами
    возвращает тот же класс.

    Raises:
        pydantic.ValidationError: Если параметры невалидны
    """
    return vector_type_of(VectorShape(scalar_type=scalar_type, size=size))


def vector_type_of(shape: VectorShape) -> type[Vector]:
    """Параметризованный класс по готовой (уже проверенной) форме."""
    cls = _VECTOR_TYPES.get(shape)
    if cls is not None:
        return cls

    bases: tuple = (Vector,)
    if shape.is_floating:
        bases = (_MetricOps,) + bases
    if shape.size == 3:
        bases = (_CrossOps,) + bases

    cls = type(
        f"Vector[{shape.describe()}]",
        bases,
        {
            "__slots__": (),
            "__module__": __name__,
            "shape": shape,
            "scalar_type": shape.scalar_type,
            "size": shape.size,
        },
    )
    _VECTOR_TYPES[shape] = cls
    return cls


# =============================================================================
# ALIASES
# =============================================================================

Vec2 = Vector[float, 2]
Vec3 = Vector[float, 3]
Vec4 = Vector[float, 4]
