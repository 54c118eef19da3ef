"""
Тесты для Matrix[T, Rows, Cols]

Проверяет:
1. Конструирование (нулевое, литерал строк, identity)
2. Поэлементную арифметику и compound формы
3. transpose, matmul (включая неквадратные), transform
4. Индексацию строк с записью в матрицу
5. Точное равенство и текстовое представление
"""

import pytest

from src.linmath.matrix import Mat2, Mat3, Mat4, Matrix
from src.linmath.shapes import ShapeMismatchError
from src.linmath.vector import Vec2, Vec3, Vector

IMat2x3 = Matrix[int, 2, 3]
IMat3x2 = Matrix[int, 3, 2]


@pytest.fixture
def m2x3() -> Matrix:
    """Неквадратная целочисленная матрица 2x3"""
    return IMat2x3([1, 2, 3], [4, 5, 6])


@pytest.fixture
def m3x2() -> Matrix:
    """Неквадратная целочисленная матрица 3x2"""
    return IMat3x2([7, 8], [9, 10], [11, 12])


# =============================================================================
# КОНСТРУИРОВАНИЕ
# =============================================================================


class TestConstruction:
    """Тесты создания матриц"""

    def test_default_is_zero(self) -> None:
        assert Mat2().to_list() == [[0.0, 0.0], [0.0, 0.0]]
        assert Mat2() == Mat2.zero()

    def test_rows_literal(self) -> None:
        m = Mat2([1, 2], [3, 4])
        assert m.to_list() == [[1.0, 2.0], [3.0, 4.0]]

    def test_rows_are_row_vectors(self) -> None:
        m = Mat3()
        assert all(isinstance(row, Vec3) for row in m)
        assert Mat3.row_type is Vec3

    def test_from_rows(self) -> None:
        m = Mat2.from_rows(iter([(1, 2), (3, 4)]))
        assert m == Mat2([1, 2], [3, 4])

    def test_identity(self) -> None:
        assert Mat3.identity() == Mat3([1, 0, 0], [0, 1, 0], [0, 0, 1])
        assert Mat4.identity()[3][3] == 1.0

    def test_identity_requires_square(self) -> None:
        with pytest.raises(ShapeMismatchError, match="square"):
            IMat2x3.identity()

    def test_copy_is_deep(self) -> None:
        m = Mat2([1, 2], [3, 4])
        c = m.copy()
        c[0][0] = 99
        assert m[0][0] == 1.0
        assert c[0] is not m[0]


# =============================================================================
# ПОЭЛЕМЕНТНАЯ АРИФМЕТИКА
# =============================================================================


class TestElementwiseArithmetic:
    """Тесты поэлементных операторов"""

    def test_add_sub(self) -> None:
        a = Mat2([1, 2], [3, 4])
        b = Mat2([10, 20], [30, 40])
        assert a + b == Mat2([11, 22], [33, 44])
        assert b - a == Mat2([9, 18], [27, 36])

    def test_scalar_operations(self) -> None:
        m = Mat2([2, 4], [6, 8])
        assert m + 1 == Mat2([3, 5], [7, 9])
        assert m - 2 == Mat2([0, 2], [4, 6])
        assert m * 0.5 == Mat2([1, 2], [3, 4])
        assert m / 2 == Mat2([1, 2], [3, 4])
        assert 2 * m == Mat2([4, 8], [12, 16])
        assert 1 + m == Mat2([3, 5], [7, 9])

    def test_integer_division_exact(self) -> None:
        """Целочисленное деление точное, с усечением к нулю"""
        big = 2**53 + 1
        m = Matrix[int, 1, 2]([big, -7])
        assert (m / 1).to_list() == [[big, -7]]
        assert (m / 2)[0, 1] == -3

        m /= 1
        assert m[0, 0] == big

    def test_negation(self) -> None:
        assert -Mat2([1, -2], [0, 3]) == Mat2([-1, 2], [0, -3])

    def test_hadamard(self) -> None:
        a = Mat2([1, 2], [3, 4])
        b = Mat2([5, 6], [7, 8])
        assert a.hadamard(b) == Mat2([5, 12], [21, 32])

    def test_hadamard_shape_mismatch(self, m2x3: Matrix) -> None:
        with pytest.raises(ShapeMismatchError, match="hadamard"):
            Mat2().hadamard(m2x3)

    def test_pure_operations_do_not_mutate(self) -> None:
        a = Mat2([1, 2], [3, 4])
        a + a
        a * 3
        assert a == Mat2([1, 2], [3, 4])

    def test_shape_mismatch_rejected(self, m2x3: Matrix) -> None:
        with pytest.raises(TypeError):
            Mat2() + m2x3

        with pytest.raises(TypeError):
            Mat2() + Vec2(1, 2)

        with pytest.raises(TypeError):
            Mat2() / Mat2()


class TestCompoundAssignment:
    """Тесты compound-assignment форм"""

    def test_matrix_forms(self) -> None:
        m = Mat2([1, 2], [3, 4])
        alias = m
        m += Mat2([1, 1], [1, 1])
        assert m == Mat2([2, 3], [4, 5])
        m -= Mat2([2, 2], [2, 2])
        assert m == Mat2([0, 1], [2, 3])
        assert m is alias

    def test_scalar_forms(self) -> None:
        m = Mat2([1, 2], [3, 4])
        alias = m
        m += 1
        m -= 2
        m *= 4
        m /= 2
        assert m is alias
        assert m == Mat2([0, 2], [4, 6])

    def test_imul_square_in_place(self) -> None:
        """A *= B изменяет A, когда форма сохраняется"""
        a = Mat2([1, 2], [3, 4])
        row = a[0]
        alias = a
        a *= Mat2([5, 6], [7, 8])
        assert a is alias
        assert a == Mat2([19, 22], [43, 50])
        assert row == Vec2(19, 22)

    def test_imul_non_square_rebinds(self, m2x3: Matrix, m3x2: Matrix) -> None:
        """Если форма меняется, имя связывается с новым произведением"""
        original = m2x3
        m2x3 *= m3x2
        assert m2x3 is not original
        assert type(m2x3) is Matrix[int, 2, 2]
        assert original == IMat2x3([1, 2, 3], [4, 5, 6])


# =============================================================================
# МАТРИЧНЫЕ ОПЕРАЦИИ
# =============================================================================


class TestTranspose:
    """Тесты transpose"""

    def test_square(self) -> None:
        """transpose({{1,2},{3,4}}) == {{1,3},{2,4}}"""
        assert Mat2([1, 2], [3, 4]).transpose() == Mat2([1, 3], [2, 4])

    def test_non_square_shape(self, m2x3: Matrix) -> None:
        t = m2x3.transpose()
        assert type(t) is IMat3x2
        assert t == IMat3x2([1, 4], [2, 5], [3, 6])

    def test_involution(self, m2x3: Matrix) -> None:
        assert m2x3.transpose().transpose() == m2x3
        m = Mat3([1.5, -2, 3], [0, 4, 5], [6, 7, 8])
        assert m.transpose().transpose() == m

    def test_degenerate_shapes(self) -> None:
        empty_rows = Matrix[float, 0, 3]()
        t = empty_rows.transpose()
        assert type(t) is Matrix[float, 3, 0]
        assert len(t) == 3
        assert t.transpose() == empty_rows

    def test_does_not_mutate(self) -> None:
        m = Mat2([1, 2], [3, 4])
        m.transpose()
        assert m == Mat2([1, 2], [3, 4])


class TestMatmul:
    """Тесты матричного произведения"""

    def test_square(self) -> None:
        a = Mat2([1, 2], [3, 4])
        b = Mat2([5, 6], [7, 8])
        assert a * b == Mat2([19, 22], [43, 50])
        assert a @ b == Mat2([19, 22], [43, 50])
        assert a.matmul(b) == Mat2([19, 22], [43, 50])

    def test_identity_neutral(self) -> None:
        m = Mat3([1, 2, 3], [4, 5, 6], [7, 8, 9])
        assert m * Mat3.identity() == m
        assert Mat3.identity() * m == m

    def test_non_square_compatible(self, m2x3: Matrix, m3x2: Matrix) -> None:
        """(2x3) x (3x2) → 2x2, (3x2) x (2x3) → 3x3"""
        product = m2x3 * m3x2
        assert type(product) is Matrix[int, 2, 2]
        assert product == Matrix[int, 2, 2]([58, 64], [139, 154])

        reverse = m3x2 * m2x3
        assert type(reverse) is Matrix[int, 3, 3]
        assert reverse == Matrix[int, 3, 3](
            [39, 54, 69],
            [49, 68, 87],
            [59, 82, 105],
        )

    def test_incompatible_operator_rejected(self, m2x3: Matrix) -> None:
        with pytest.raises(TypeError):
            m2x3 * m2x3

        with pytest.raises(TypeError):
            m2x3 @ m2x3

    def test_incompatible_named_raises(self, m2x3: Matrix) -> None:
        with pytest.raises(ShapeMismatchError, match="left cols"):
            m2x3.matmul(m2x3)

    def test_scalar_type_mismatch(self) -> None:
        with pytest.raises(ShapeMismatchError):
            Mat2().matmul(Matrix[int, 2, 2]())

        with pytest.raises(ShapeMismatchError, match="requires a Matrix"):
            Mat2().matmul(Vec2())

    def test_transpose_of_product(self, m2x3: Matrix, m3x2: Matrix) -> None:
        """(AB)^T == B^T A^T"""
        assert (m2x3 * m3x2).transpose() == m3x2.transpose() * m2x3.transpose()


class TestTransform:
    """Тесты transform"""

    def test_identity(self) -> None:
        """Единичная 3x3 матрица оставляет {7,8,9} без изменений"""
        m = Mat3([1, 0, 0], [0, 1, 0], [0, 0, 1])
        assert m.transform(Vec3(7, 8, 9)) == Vec3(7, 8, 9)

    def test_square(self) -> None:
        m = Mat2([1, 2], [3, 4])
        assert m.transform(Vec2(1, 1)) == Vec2(3, 7)
        assert m @ Vec2(1, 1) == Vec2(3, 7)

    def test_non_square_maps_cols_to_rows(self, m2x3: Matrix) -> None:
        """Matrix[T, 2, 3] x Vector[T, 3] → Vector[T, 2]"""
        result = m2x3.transform(Vector[int, 3](1, 1, 1))
        assert type(result) is Vector[int, 2]
        assert result == Vector[int, 2](6, 15)

    def test_length_mismatch_raises(self, m2x3: Matrix) -> None:
        with pytest.raises(ShapeMismatchError, match="transform"):
            m2x3.transform(Vector[int, 2](1, 1))

    def test_scalar_type_mismatch_raises(self) -> None:
        with pytest.raises(ShapeMismatchError):
            Mat2().transform(Vector[int, 2](1, 1))

    def test_matmul_operator_rejects_wrong_vector(self, m2x3: Matrix) -> None:
        with pytest.raises(TypeError):
            m2x3 @ Vector[int, 2](1, 1)

    def test_composition(self) -> None:
        """(AB)v == A(Bv)"""
        a = Mat2([0, -1], [1, 0])
        b = Mat2([2, 0], [0, 3])
        v = Vec2(1, 1)
        assert (a * b).transform(v) == a.transform(b.transform(v))


# =============================================================================
# ПРОТОКОЛЫ
# =============================================================================


class TestIndexing:
    """Тесты индексации"""

    def test_row_access(self) -> None:
        m = Mat2([1, 2], [3, 4])
        assert m[1] == Vec2(3, 4)
        assert m[1][0] == 3.0
        assert m[1, 0] == 3.0

    def test_row_write_through(self) -> None:
        """m[i][j] = x изменяет матрицу"""
        m = Mat2()
        m[0][1] = 9
        assert m[0, 1] == 9.0
        assert m == Mat2([0, 9], [0, 0])

    def test_tuple_write(self) -> None:
        m = Mat2()
        m[1, 1] = 5
        assert m.to_list() == [[0.0, 0.0], [0.0, 5.0]]

    def test_row_replace_padded(self) -> None:
        m = Mat2([1, 2], [3, 4])
        row = m[1]
        m[1] = [5]
        assert m == Mat2([1, 2], [5, 0])
        assert row == Vec2(5, 0)

    def test_row_replace_rejects_strings(self) -> None:
        m = Mat2([1, 2], [3, 4])
        with pytest.raises(TypeError):
            m[0] = ["5", "6"]
        with pytest.raises(TypeError):
            m[0, 1] = "5"
        assert m == Mat2([1, 2], [3, 4])

    def test_slice_assignment_rejected(self) -> None:
        m = Mat2([1, 2], [3, 4])
        with pytest.raises(TypeError, match="one at a time"):
            m[0:1] = [[5, 6]]
        assert m == Mat2([1, 2], [3, 4])

    def test_len_and_iter(self, m2x3: Matrix) -> None:
        assert len(m2x3) == 2
        assert [row.to_list() for row in m2x3] == [[1, 2, 3], [4, 5, 6]]


class TestEqualityAndRendering:
    """Тесты ==, is_close и текстового представления"""

    def test_exact_equality(self) -> None:
        assert Mat2([1, 2], [3, 4]) == Mat2([1, 2], [3, 4])
        assert Mat2([1, 2], [3, 4]) != Mat2([1, 2], [3, 5])

    def test_different_types_not_equal(self) -> None:
        assert Mat2() != Matrix[int, 2, 2]()
        assert Mat2() != [[0.0, 0.0], [0.0, 0.0]]

    def test_is_close(self) -> None:
        a = Mat2([0.1 + 0.2, 0], [0, 1])
        b = Mat2([0.3, 0], [0, 1])
        assert a != b
        assert a.is_close(b)

    def test_is_close_shape_mismatch(self, m2x3: Matrix) -> None:
        with pytest.raises(ShapeMismatchError):
            Mat2().is_close(m2x3)

    def test_is_finite(self) -> None:
        assert Mat2.identity().is_finite()
        assert not Mat2([float("nan"), 0], [0, 0]).is_finite()

    def test_str_one_row_per_line(self) -> None:
        assert str(Matrix[int, 2, 2]([1, 2], [3, 4])) == "[ 1, 2 ]\n[ 3, 4 ]"

    def test_repr_names_type(self) -> None:
        assert repr(Mat2([1, 2], [3, 4])) == "Matrix[float, 2, 2]([1.0, 2.0], [3.0, 4.0])"

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Mat2())
