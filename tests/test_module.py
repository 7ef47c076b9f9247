import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mlkem.module import Module
from mlkem.ring import Ring


@pytest.fixture(autouse=True)
def _seed():
    random.seed(1234)


def _ntt_random(m, n):
    return Module.random(m, n).to_ntt()


def test_mat_mul_square_properties():
    zero = Ring.zero()
    one = Ring.one()
    zero_module = Module([[zero, zero], [zero, zero]], False)
    identity_module = Module([[one, zero], [zero, one]], False)

    a = Module.random(2, 2)
    b = Module.random(2, 2)
    c = Module.random(2, 2)
    r = Ring.random()
    d = Module([[r, zero], [zero, r]], False)

    assert a.mat_mul(zero_module) == zero_module
    assert a.mat_mul(identity_module) == a
    assert a.mat_mul(d) == d.mat_mul(a)
    assert a.mat_mul(b + c) == a.mat_mul(b) + a.mat_mul(c)


def test_mat_mul_rectangle_distributive():
    for _ in range(3):
        a = _ntt_random(11, 4)
        b = _ntt_random(4, 3)
        c = _ntt_random(4, 3)
        assert a.mat_mul(b + c) == a.mat_mul(b) + a.mat_mul(c)


def test_mat_mul_result_shape():
    a = _ntt_random(3, 2)
    b = _ntt_random(2, 4)
    assert a.mat_mul(b).dim() == (3, 4)


def test_mat_mul_invalid_dimensions():
    a = _ntt_random(2, 3)
    b = _ntt_random(2, 3)
    with pytest.raises(ValueError, match="Invalid dimensions"):
        a.mat_mul(b)


def test_dim_respects_transpose():
    data = [[Ring.zero(), Ring.one(), Ring.x()]]
    assert Module(data, False).dim() == (1, 3)
    assert Module(data, True).dim() == (3, 1)


def test_getitem_respects_transpose():
    data = [[Ring.zero(), Ring.one(), Ring.x()]]
    assert Module(data, False)[0, 2] == Ring.x()
    assert Module(data, True)[2, 0] == Ring.x()
    assert Module(data, True)[1, 0] == Ring.one()


def test_dot_of_column_vectors():
    v = Module([[Ring.one(), Ring.x()]], True)
    w = Module([[Ring.x(), Ring.one()]], True)
    result = v.dot(w)
    assert result.coefficients[1] == 2
    assert sum(result.coefficients) == 2


def test_dot_invalid_shape():
    v = Module([[Ring.one(), Ring.x()]], False)
    w = Module([[Ring.x(), Ring.one()]], False)
    with pytest.raises(ValueError):
        v.dot(w)


def test_add_drops_transpose_and_adds_elements():
    v = Module([[Ring.one(), Ring.x()]], True)
    s = v + v
    assert s.transpose is False
    assert s.dim() == (2, 1)
    assert s[0, 0].coefficients[0] == 2
    assert s[1, 0].coefficients[1] == 2


def test_ntt_round_trip_keeps_transpose():
    m = Module.random(2, 1)
    m = Module(m.data, True)
    back = m.to_ntt().from_ntt()
    assert back == m
    assert m.to_ntt().transpose is True


def test_encode_concatenates_elements():
    v = Module([[Ring.one(), Ring.x()]], True)
    encoded = v.encode(12)
    assert len(encoded) == 2 * 384
    assert encoded[:384] == Ring.one().encode(12)
    assert encoded[384:] == Ring.x().encode(12)


def test_decode_vector_wrong_length():
    with pytest.raises(ValueError, match="wrong length"):
        Module.decode_vector(b"\x00" * 100, 2, 12, True)


def test_decode_vector_sets_ntt_flag():
    v = Module.decode_vector(bytes(2 * 384), 2, 12, True)
    assert v.dim() == (2, 1)
    assert v.transpose is True
    assert v[0, 0] == Ring([0] * 256, True)


@settings(max_examples=20, deadline=None)
@given(
    st.integers(min_value=1, max_value=4),
    st.sampled_from([1, 4, 5, 10, 11, 12]),
    st.data(),
)
def test_encode_decode_round_trip(k, d, data):
    limit = 3328 if d == 12 else (1 << d) - 1
    rings = [
        Ring(data.draw(st.lists(st.integers(0, limit), min_size=256, max_size=256)))
        for _ in range(k)
    ]
    v = Module([rings], True)
    assert Module.decode_vector(v.encode(d), k, d, False) == v


def test_compress_decompress_elementwise():
    v = Module([[Ring.random(), Ring.random()]], True)
    compressed = v.compress(10)
    assert compressed[0, 0] == v[0, 0].compress(10)
    assert compressed[1, 0] == v[1, 0].compress(10)
    restored = compressed.decompress(10)
    assert restored[1, 0] == v[1, 0].compress(10).decompress(10)
    assert restored.transpose is True


def test_compress_decompress_close():
    v = Module([[Ring.random()]], True)
    restored = v.compress(11).decompress(11)
    for orig, back in zip(v[0, 0].coefficients, restored[0, 0].coefficients):
        diff = min((orig - back) % 3329, (back - orig) % 3329)
        assert diff <= 1


def test_repr_format():
    v = Module([[Ring.one(), Ring.x()]], False)
    assert repr(v) == "[[1 + , x + ]]"
    w = Module([[Ring.one()], [Ring.x()]], False)
    assert repr(w) == "[[1 + ][x + ]]"


def test_equality_depends_on_transpose():
    data = [[Ring.one(), Ring.x()]]
    assert Module(data, True) == Module(data, True)
    assert not (Module(data, True) == Module(data, False))