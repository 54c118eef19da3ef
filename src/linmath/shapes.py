"""
Shapes — Параметры размерности Vector/Matrix

Immutable Pydantic модели, описывающие generic-параметры контейнеров:
- VectorShape: (T, N) для Vector[T, N]
- MatrixShape: (T, Rows, Cols) для Matrix[T, Rows, Cols]

Параметры проверяются один раз, в момент параметризации типа
(Vector[float, 3]), а не при каждой операции. Невалидные параметры
вызывают pydantic.ValidationError (подкласс ValueError).
"""

from pydantic import BaseModel, Field, field_validator

from src.linmath.scalars import is_floating_type, is_scalar_type


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ShapeMismatchError(TypeError):
    """
    Операнд имеет другую размерность или другой скалярный тип.

    Операторы (+, -, *, ...) в этом случае возвращают NotImplemented,
    и Python сам вызывает TypeError. Именованные операции (dot, cross,
    matmul, transform) вызывают ShapeMismatchError явно.
    """

    pass


def _check_scalar_type(v: type) -> type:
    if not is_scalar_type(v):
        raise ValueError(
            f"scalar_type must be a real numeric class (int, float, Fraction, ...), got {v!r}"
        )
    return v


# =============================================================================
# VECTOR SHAPE
# =============================================================================


class VectorShape(BaseModel):
    """
    Параметры Vector[T, N].

    Immutable модель (frozen=True): используется как ключ кэша
    параметризованных типов.
    """

    scalar_type: type = Field(..., description="Скалярный тип компонент (T)")
    size: int = Field(..., ge=0, strict=True, description="Количество компонент (N)")

    model_config = {"frozen": True}

    @field_validator("scalar_type")
    @classmethod
    def validate_scalar_type(cls, v: type) -> type:
        """Только вещественные числовые классы, bool исключён."""
        return _check_scalar_type(v)

    @property
    def is_floating(self) -> bool:
        """Доступны ли magnitude/normalize/distance."""
        return is_floating_type(self.scalar_type)

    def describe(self) -> str:
        """Человекочитаемая форма, например 'float, 3'."""
        return f"{self.scalar_type.__name__}, {self.size}"


# =============================================================================
# MATRIX SHAPE
# =============================================================================


class MatrixShape(BaseModel):
    """
    Параметры Matrix[T, Rows, Cols].

    Row-major: внешний индекс — строка, внутренний — столбец.
    """

    scalar_type: type = Field(..., description="Скалярный тип ячеек (T)")
    rows: int = Field(..., ge=0, strict=True, description="Количество строк")
    cols: int = Field(..., ge=0, strict=True, description="Количество столбцов")

    model_config = {"frozen": True}

    @field_validator("scalar_type")
    @classmethod
    def validate_scalar_type(cls, v: type) -> type:
        """Только вещественные числовые классы, bool исключён."""
        return _check_scalar_type(v)

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    @property
    def row_shape(self) -> VectorShape:
        """Форма одной строки: Vector[T, Cols]."""
        return VectorShape(scalar_type=self.scalar_type, size=self.cols)

    @property
    def column_shape(self) -> VectorShape:
        """Форма столбца и результата transform: Vector[T, Rows]."""
        return VectorShape(scalar_type=self.scalar_type, size=self.rows)

    def transposed(self) -> "MatrixShape":
        """Форма транспонированной матрицы (Cols x Rows)."""
        return MatrixShape(scalar_type=self.scalar_type, rows=self.cols, cols=self.rows)

    def product_with(self, other: "MatrixShape") -> "MatrixShape":
        """
        Форма произведения self x other.

        Условие совместимости: self.cols == other.rows и одинаковый
        скалярный тип. Результат: self.rows x other.cols.

        Raises:
            ShapeMismatchError: Если формы несовместимы
        """
        if self.scalar_type is not other.scalar_type or self.cols != other.rows:
            raise ShapeMismatchError(
                f"Cannot multiply Matrix[{self.describe()}] by Matrix[{other.describe()}]: "
                f"left cols ({self.cols}) must equal right rows ({other.rows}) "
                f"and scalar types must match"
            )
        return MatrixShape(scalar_type=self.scalar_type, rows=self.rows, cols=other.cols)

    def describe(self) -> str:
        """Человекочитаемая форма, например 'float, 2, 3'."""
        return f"{self.scalar_type.__name__}, {self.rows}, {self.cols}"
