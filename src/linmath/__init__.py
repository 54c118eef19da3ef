"""
linmath — векторы и матрицы фиксированной размерности

Лёгкие value-типы для 2D/3D/4D математики: поэлементная арифметика,
dot/cross, normalize, lerp, reflect, transpose, transform, matmul.
"""

# Scalars
from src.linmath.scalars import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    clamp_scalar,
    divide_scalar,
    is_close,
    is_floating_type,
    is_scalar,
    is_scalar_type,
    is_valid_float,
)

# Shapes
from src.linmath.shapes import MatrixShape, ShapeMismatchError, VectorShape

# Vector
from src.linmath.vector import Vec2, Vec3, Vec4, Vector, vector_type, vector_type_of

# Matrix
from src.linmath.matrix import Mat2, Mat3, Mat4, Matrix, matrix_type, matrix_type_of

# Functional
from src.linmath.functional import (
    clamp,
    cross,
    distance,
    dot,
    lerp,
    magnitude,
    matmul,
    normalized,
    reflect,
    transform,
    transpose,
)

__all__ = [
    # Scalars — Constants
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    # Scalars — Functions
    "clamp_scalar",
    "divide_scalar",
    "is_close",
    "is_floating_type",
    "is_scalar",
    "is_scalar_type",
    "is_valid_float",
    # Shapes
    "MatrixShape",
    "ShapeMismatchError",
    "VectorShape",
    # Vector
    "Vector",
    "Vec2",
    "Vec3",
    "Vec4",
    "vector_type",
    "vector_type_of",
    # Matrix
    "Matrix",
    "Mat2",
    "Mat3",
    "Mat4",
    "matrix_type",
    "matrix_type_of",
    # Functional
    "clamp",
    "cross",
    "distance",
    "dot",
    "lerp",
    "magnitude",
    "matmul",
    "normalized",
    "reflect",
    "transform",
    "transpose",
]
