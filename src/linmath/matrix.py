"""
Matrix — Матрица фиксированного размера

Generic контейнер Matrix[T, Rows, Cols]: сетка Rows x Cols скаляров типа T,
row-major (внешний индекс — строка, внутренний — столбец).

Строки хранятся как Vector[T, Cols], поэтому поэлементные операции
используют тот же комбинатор, что и Vector. m[i] возвращает саму строку:
запись m[i][j] = x изменяет матрицу.

Операции:
- Поэлементные +, - (matrix-matrix), +, -, *, / (matrix-scalar),
  чистые и compound-assignment формы; hadamard — поэлементное произведение
- * и @ между матрицами — матричное произведение
- transpose, transform (matrix x vector), identity

УМНОЖЕНИЕ:
    Условие: left.cols == right.rows (стандартное правило).
    Результат: Matrix[T, left.rows, right.cols].

TRANSFORM:
    Matrix[T, R, C] отображает Vector[T, C] в Vector[T, R]:
        result[i] = Σ_j self[i][j] * vector[j]
"""

import operator
from itertools import islice
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional

from pydantic_core import core_schema

from src.linmath.scalars import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    divide_scalar,
    is_scalar,
)
from src.linmath.shapes import MatrixShape, ShapeMismatchError
from src.linmath.vector import Vector, vector_type_of

# Кэш параметризованных классов: MatrixShape → класс
_MATRIX_TYPES: dict[MatrixShape, type["Matrix"]] = {}


# =============================================================================
# BASE MATRIX
# =============================================================================


class Matrix:
    """
    Generic матрица фиксированного размера.

    Непараметризованный Matrix нельзя инстанцировать: используйте
    Matrix[T, Rows, Cols] или алиасы Mat2/Mat3/Mat4.

    Конструктор принимает строки позиционно:
        Mat2([1, 2], [3, 4])

    Предусловие: ровно Rows строк по ровно Cols скаляров. Недостающие
    значения заполняются нулями, лишние отбрасываются, но полагаться
    на это не следует.
    """

    __slots__ = ("_rows",)

    shape: ClassVar[Optional[MatrixShape]] = None
    scalar_type: ClassVar[type]
    rows: ClassVar[int]
    cols: ClassVar[int]
    row_type: ClassVar[type[Vector]]
    column_type: ClassVar[type[Vector]]

    def __class_getitem__(cls, params: Any) -> type["Matrix"]:
        if cls.shape is not None:
            raise TypeError(f"{cls.__name__} is already parametrized")
        if not isinstance(params, tuple) or len(params) != 3:
            raise TypeError("Matrix must be parametrized as Matrix[T, Rows, Cols]")
        scalar_type, rows, cols = params
        return matrix_type(scalar_type, rows, cols)

    def __init__(self, *rows: Iterable[Any]) -> None:
        if self.shape is None:
            raise TypeError("Matrix is generic: parametrize it first, e.g. Matrix[float, 3, 3]")
        self._rows = self._padded(rows)

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def _padded(cls, rows: Iterable[Iterable[Any]]) -> list[Vector]:
        result = [cls.row_type.from_iterable(row) for row in islice(rows, cls.rows)]
        result.extend(cls.row_type() for _ in range(cls.rows - len(result)))
        return result

    @classmethod
    def _from_row_vectors(cls, rows: Iterable[Vector]) -> "Matrix":
        # rows содержит ровно Rows векторов типа row_type
        instance = cls.__new__(cls)
        instance._rows = list(rows)
        return instance

    @classmethod
    def zero(cls) -> "Matrix":
        """Нулевая матрица."""
        return cls()

    @classmethod
    def identity(cls) -> "Matrix":
        """
        Единичная матрица.

        Raises:
            ShapeMismatchError: Если матрица не квадратная
        """
        if not cls.shape.is_square:
            raise ShapeMismatchError(
                f"identity requires a square matrix, got Matrix[{cls.shape.describe()}]"
            )
        result = cls()
        for i in range(cls.rows):
            result._rows[i][i] = 1
        return result

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> "Matrix":
        """Создание матрицы из iterable строк (правило как у конструктора)."""
        if cls.shape is None:
            raise TypeError("Matrix is generic: parametrize it first, e.g. Matrix[float, 3, 3]")
        instance = cls.__new__(cls)
        instance._rows = cls._padded(iter(rows))
        return instance

    def copy(self) -> "Matrix":
        """Независимая копия значения (строки не разделяются)."""
        return self._from_row_vectors(row.copy() for row in self._rows)

    # -------------------------------------------------------------------------
    # Поэлементный комбинатор
    # -------------------------------------------------------------------------

    def _same_shape(self, other: Any) -> bool:
        return isinstance(other, Matrix) and other.shape == self.shape

    def _row_operands(self, other: Any) -> Optional[Iterable[tuple]]:
        if self._same_shape(other):
            return zip(self._rows, other._rows)
        if is_scalar(other):
            return ((row, other) for row in self._rows)
        return None

    def _combine(self, other: Any, op: Callable[[Any, Any], Any]) -> "Matrix":
        pairs = self._row_operands(other)
        if pairs is None:
            return NotImplemented
        return self._from_row_vectors(row._combine(rhs, op) for row, rhs in pairs)

    def _combine_inplace(self, other: Any, op: Callable[[Any, Any], Any]) -> "Matrix":
        pairs = self._row_operands(other)
        if pairs is None:
            return NotImplemented
        for row, rhs in pairs:
            row._combine_inplace(rhs, op)
        return self

    def __add__(self, other: Any) -> "Matrix":
        return self._combine(other, operator.add)

    def __sub__(self, other: Any) -> "Matrix":
        return self._combine(other, operator.sub)

    def __mul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            if not self._can_multiply(other):
                return NotImplemented
            return self.matmul(other)
        return self._combine(other, operator.mul)

    def __truediv__(self, other: Any) -> "Matrix":
        if not is_scalar(other):
            return NotImplemented
        return self._combine(other, divide_scalar)

    def __radd__(self, other: Any) -> "Matrix":
        if not is_scalar(other):
            return NotImplemented
        return self._combine(other, operator.add)

    def __rmul__(self, other: Any) -> "Matrix":
        if not is_scalar(other):
            return NotImplemented
        return self._combine(other, operator.mul)

    def __iadd__(self, other: Any) -> "Matrix":
        return self._combine_inplace(other, operator.add)

    def __isub__(self, other: Any) -> "Matrix":
        return self._combine_inplace(other, operator.sub)

    def __imul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            if not self._can_multiply(other):
                return NotImplemented
            product = self.matmul(other)
            if product.shape != self.shape:
                # форма меняется: Python присвоит результат __mul__
                return NotImplemented
            for row, product_row in zip(self._rows, product._rows):
                row._data = product_row._data
            return self
        return self._combine_inplace(other, operator.mul)

    def __itruediv__(self, other: Any) -> "Matrix":
        if not is_scalar(other):
            return NotImplemented
        return self._combine_inplace(other, divide_scalar)

    def __neg__(self) -> "Matrix":
        return self * -1

    def hadamard(self, other: "Matrix") -> "Matrix":
        """
        Поэлементное произведение матриц одной формы.

        Raises:
            ShapeMismatchError: Если other другой формы
        """
        if not self._same_shape(other):
            raise ShapeMismatchError(
                f"hadamard requires Matrix[{self.shape.describe()}], got {type(other).__name__}"
            )
        return self._combine(other, operator.mul)

    # -------------------------------------------------------------------------
    # Матричные операции
    # -------------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        """Транспонирование: result[j][i] = self[i][j], форма Cols x Rows."""
        result_type = matrix_type_of(self.shape.transposed())
        columns = zip(*self._rows) if self._rows else [()] * self.cols
        return result_type._from_row_vectors(
            result_type.row_type._from_values(column) for column in columns
        )

    def _can_multiply(self, other: "Matrix") -> bool:
        return self.scalar_type is other.scalar_type and self.cols == other.rows

    def matmul(self, other: "Matrix") -> "Matrix":
        """
        Матричное произведение (строка на столбец).

        result[i][j] = Σ_k self[i][k] * other[k][j]

        Args:
            other: Матрица с other.rows == self.cols

        Returns:
            Matrix[T, self.rows, other.cols]

        Raises:
            ShapeMismatchError: Если формы несовместимы
        """
        if not isinstance(other, Matrix):
            raise ShapeMismatchError(f"matmul requires a Matrix, got {type(other).__name__}")
        result_type = matrix_type_of(self.shape.product_with(other.shape))
        columns = other.transpose()._rows
        return result_type._from_row_vectors(
            result_type.row_type._from_values(row.dot(column) for column in columns)
            for row in self._rows
        )

    def transform(self, vector: Vector) -> Vector:
        """
        Применение матрицы к вектору: result[i] = Σ_j self[i][j] * vector[j].

        Args:
            vector: Vector[T, Cols]

        Returns:
            Vector[T, Rows]

        Raises:
            ShapeMismatchError: Если длина вектора не равна Cols
                или скалярный тип другой
        """
        if not isinstance(vector, self.row_type):
            raise ShapeMismatchError(
                f"transform of Matrix[{self.shape.describe()}] requires "
                f"Vector[{self.row_type.shape.describe()}], got {type(vector).__name__}"
            )
        return self.column_type._from_values(row.dot(vector) for row in self._rows)

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, Matrix):
            if not self._can_multiply(other):
                return NotImplemented
            return self.matmul(other)
        if isinstance(other, self.row_type):
            return self.transform(other)
        return NotImplemented

    # -------------------------------------------------------------------------
    # Приближённые сравнения
    # -------------------------------------------------------------------------

    def is_close(
        self,
        other: "Matrix",
        rel_tol: float = EPS_FLOAT_COMPARE_REL,
        abs_tol: float = EPS_FLOAT_COMPARE_ABS,
    ) -> bool:
        """Поячеечное сравнение с толерантностью (== всегда точное)."""
        if not self._same_shape(other):
            raise ShapeMismatchError(
                f"is_close requires Matrix[{self.shape.describe()}], got {type(other).__name__}"
            )
        return all(
            row.is_close(other_row, rel_tol=rel_tol, abs_tol=abs_tol)
            for row, other_row in zip(self._rows, other._rows)
        )

    def is_finite(self) -> bool:
        """Все ячейки конечны (нет NaN/Inf)."""
        return all(row.is_finite() for row in self._rows)

    # -------------------------------------------------------------------------
    # Протоколы Python
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not self._same_shape(other):
            return NotImplemented
        return all(row == other_row for row, other_row in zip(self._rows, other._rows))

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, tuple):
            row, col = index
            return self._rows[row][col]
        return self._rows[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, tuple):
            row, col = index
            self._rows[row][col] = value
            return
        if isinstance(index, slice):
            raise TypeError("Matrix rows must be assigned one at a time")
        self._rows[index]._data = self.row_type.from_iterable(value)._data

    def __len__(self) -> int:
        return self.rows

    def __iter__(self) -> Iterator[Vector]:
        return iter(self._rows)

    def to_list(self) -> list[list]:
        return [row.to_list() for row in self._rows]

    def __repr__(self) -> str:
        rows = ", ".join(repr(row.to_list()) for row in self._rows)
        return f"{type(self).__name__}({rows})"

    def __str__(self) -> str:
        return "\n".join(f"[ {', '.join(str(x) for x in row)} ]" for row in self._rows)

    # -------------------------------------------------------------------------
    # Pydantic
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        if cls.shape is None:
            raise TypeError("Matrix is generic: annotate fields with Matrix[T, Rows, Cols]")
        return core_schema.no_info_plain_validator_function(
            cls._validate_field,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_list()
            ),
        )

    @classmethod
    def _validate_field(cls, value: Any) -> "Matrix":
        if isinstance(value, cls):
            return value
        if isinstance(value, Matrix):
            raise ValueError(
                f"expected Matrix[{cls.shape.describe()}], got {type(value).__name__}"
            )
        if isinstance(value, (str, bytes, Vector)):
            raise ValueError(f"expected a sequence of rows, got {type(value).__name__}")
        try:
            rows = list(value)
            if any(isinstance(row, (str, bytes)) for row in rows):
                raise ValueError("expected a sequence of rows of numbers, got a string row")
            return cls.from_rows(rows)
        except TypeError as e:
            raise ValueError(f"expected a sequence of rows of numbers: {e}") from e


# =============================================================================
# PARAMETRIZATION
# =============================================================================


def matrix_type(scalar_type: type, rows: int, cols: int) -> type[Matrix]:
    """
    Параметризованный класс Matrix[scalar_type, rows, cols].

    Классы кэшируются: повторный вызов с теми же параметрами
    возвращает тот же класс.

    Raises:
        pydantic.ValidationError: Если параметры невалидны
    """
    return matrix_type_of(MatrixShape(scalar_type=scalar_type, rows=rows, cols=cols))


def matrix_type_of(shape: MatrixShape) -> type[Matrix]:
    """Параметризованный класс по готовой (уже проверенной) форме."""
    cls = _MATRIX_TYPES.get(shape)
    if cls is not None:
        return cls

    cls = type(
        f"Matrix[{shape.describe()}]",
        (Matrix,),
        {
            "__slots__": (),
            "__module__": __name__,
            "shape": shape,
            "scalar_type": shape.scalar_type,
            "rows": shape.rows,
            "cols": shape.cols,
            "row_type": vector_type_of(shape.row_shape),
            "column_type": vector_type_of(shape.column_shape),
        },
    )
    _MATRIX_TYPES[shape] = cls
    return cls


# =============================================================================
# ALIASES
# =============================================================================

Mat2 = Matrix[float, 2, 2]
Mat3 = Matrix[float, 3, 3]
Mat4 = Matrix[float, 4, 4]
