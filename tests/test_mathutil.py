import pytest

from tr7rt.mathutil import Matrix, Vector, clamp


@pytest.mark.parametrize(
    "value, low, high, expected",
    [
        (5, 0, 10, 5),
        (-3, 0, 10, 0),
        (12, 0, 10, 10),
        (40000, -32768, 32767, 32767),
        (-40000, -32768, 32767, -32768),
        (90, 0, 88, 88),
    ],
)
def test_clamp(value, low, high, expected):
    assert clamp(value, low, high) == expected


def test_clamp_lower_bound_wins_when_bounds_are_inverted():
    assert clamp(5, 10, 0) == 10


def test_clamp_floats():
    assert clamp(1.5, 0.0, 1.0) == 1.0


def test_vector_defaults_and_iteration():
    v = Vector()
    assert list(v) == [0.0, 0.0, 0.0, 0.0]
    assert list(Vector(1, 2, 3, 4)) == [1, 2, 3, 4]


def test_matrix_transpose_to_rows_orders_by_row():
    cols = [Vector(c * 10 + 1, c * 10 + 2, c * 10 + 3, c * 10 + 4) for c in range(4)]
    m = Matrix(*cols)
    rows = m.transpose_to_rows()
    assert len(rows) == 16
    for r, axis in enumerate("xyzw"):
        assert rows[r * 4 : r * 4 + 4] == tuple(getattr(c, axis) for c in cols)


def test_matrix_transpose_first_row_matches_x_components():
    m = Matrix(Vector(x=1.0), Vector(x=2.0), Vector(x=3.0), Vector(x=4.0))
    assert m.transpose_to_rows()[:4] == (1.0, 2.0, 3.0, 4.0)
    assert m.transpose_to_rows()[4:] == (0.0,) * 12