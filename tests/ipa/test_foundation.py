"""
Foundation module tests: field.py, polynomial.py
"""
import random

import pytest

from ipaplonk.errors import MalformedInputError, NonInvertibleElementError
from ipaplonk.field import (
    CURVE_ORDER,
    batch_inverse,
    mod,
    mod_exp,
    mod_exp_no_prime,
    mod_inverse,
)
from ipaplonk.polynomial import (
    divide_by_vanishing,
    eval_poly,
    eval_poly_barycentric,
    eval_poly_fft,
    eval_poly_lagrange,
    interpolate_ifft,
    is_power_of_two,
    left_shift,
    next_power_of_two,
    pad_length,
    pad_permutation,
    pad_power_of_two,
    powers_of,
    vector_add,
    vector_div,
    vector_mod,
    vector_mul,
    vector_sub,
)
from ipaplonk.primes import get_all_roots_of_unity
from ipaplonk.basis import seeded_randbytes


# 작은 교육용 필드: 85는 F_337의 원시 8차 단위근
P_SMALL = 337
W8 = [1, 85, 148, 111, 336, 252, 189, 226]


@pytest.fixture(scope="module")
def curve_roots():
    """bn128 스칼라 필드의 16차 단위근."""
    return get_all_roots_of_unity(4, CURVE_ORDER, seeded_randbytes(b"fft"))


# =====================================================================
# 모듈러 산술
# =====================================================================

class TestModularArithmetic:
    def test_mod_negative(self):
        assert mod(-5, 7) == 2
        assert mod(-CURVE_ORDER - 1, CURVE_ORDER) == CURVE_ORDER - 1

    def test_mod_exp(self):
        assert mod_exp(2, 10, 1000003) == 1024
        assert mod_exp(3, 4, 7) == 4
        assert mod_exp(5, 0, 7) == 1

    def test_mod_exp_negative_exponent(self):
        assert mod_exp(3, -1, 7) == 5
        assert mod_exp(3, -2, 7) * 9 % 7 == 1

    def test_mod_exp_no_prime(self):
        assert mod_exp_no_prime(2, 10, 1000) == 24
        # 지수를 축소하지 않으므로 φ(15) = 8 과 무관하게 정확하다
        assert mod_exp_no_prime(2, 9, 15) == 512 % 15

    def test_mod_exp_no_prime_rejects_negative(self):
        with pytest.raises(MalformedInputError):
            mod_exp_no_prime(2, -1, 15)

    def test_mod_inverse(self):
        assert mod_inverse(3, 7) == 5
        assert mod_inverse(-3, 7) == 2
        x = 123456789
        assert x * mod_inverse(x, CURVE_ORDER) % CURVE_ORDER == 1

    def test_mod_inverse_zero(self):
        with pytest.raises(NonInvertibleElementError):
            mod_inverse(0, 7)
        with pytest.raises(NonInvertibleElementError):
            mod_inverse(14, 7)

    def test_mod_inverse_not_coprime(self):
        with pytest.raises(NonInvertibleElementError):
            mod_inverse(6, 9)

    def test_non_invertible_is_zero_division(self):
        with pytest.raises(ZeroDivisionError):
            mod_inverse(0, 7)


class TestBatchInverse:
    def test_matches_single_inverse(self):
        rng = random.Random(7)
        values = [rng.randrange(1, CURVE_ORDER) for _ in range(20)]
        inverses = batch_inverse(values, CURVE_ORDER)
        assert inverses == [mod_inverse(v, CURVE_ORDER) for v in values]

    def test_small_field(self):
        assert batch_inverse([3, 2, 6], 7) == [5, 4, 6]

    def test_empty(self):
        assert batch_inverse([], 7) == []

    def test_zero_element_raises(self):
        with pytest.raises(NonInvertibleElementError):
            batch_inverse([1, 0, 3], 7)


# =====================================================================
# 벡터 연산
# =====================================================================

class TestVectorOps:
    def test_vector_mod(self):
        assert vector_mod([-1, 7, 8], 7) == [6, 0, 1]

    def test_add_sub_zero_extend(self):
        assert vector_add([1, 2, 3], [5], 7) == [6, 2, 3]
        assert vector_sub([1], [2, 3], 7) == [6, 4]

    def test_mul_div(self):
        a = [2, 3, 4]
        b = [5, 6, 3]
        assert vector_mul(a, b, 7) == [3, 4, 5]
        assert vector_div(vector_mul(a, b, 7), b, 7) == a

    def test_div_by_zero(self):
        with pytest.raises(NonInvertibleElementError):
            vector_div([1, 2], [1, 0], 7)


# =====================================================================
# FFT / IFFT
# =====================================================================

class TestFFT:
    def test_small_field_matches_horner(self):
        f = [3, 1, 4, 1, 5, 9, 2, 6]
        evals = eval_poly_fft(f, W8, P_SMALL)
        assert evals[0] == sum(f) % P_SMALL
        assert evals == [eval_poly(f, w, P_SMALL) for w in W8]

    def test_small_field_roundtrip(self):
        f = [3, 1, 4, 1, 5, 9, 2, 6]
        assert interpolate_ifft(eval_poly_fft(f, W8, P_SMALL), W8, P_SMALL) == f

    def test_curve_field_roundtrip(self, curve_roots):
        rng = random.Random(1)
        f = [rng.randrange(CURVE_ORDER) for _ in range(16)]
        evals = eval_poly_fft(f, curve_roots, CURVE_ORDER)
        assert evals[3] == eval_poly(f, curve_roots[3], CURVE_ORDER)
        assert interpolate_ifft(evals, curve_roots, CURVE_ORDER) == f

    def test_short_input_is_padded(self):
        evals = eval_poly_fft([7, 1], W8, P_SMALL)
        assert len(evals) == 8
        assert interpolate_ifft(evals, W8, P_SMALL) == [7, 1, 0, 0, 0, 0, 0, 0]

    def test_negative_coefficients(self):
        assert eval_poly_fft([-1], [1], P_SMALL) == [P_SMALL - 1]

    def test_ifft_of_constant(self):
        # 모든 점에서 5인 다항식은 상수 5
        assert interpolate_ifft([5] * 8, W8, P_SMALL) == [5, 0, 0, 0, 0, 0, 0, 0]

    def test_too_many_coefficients(self):
        with pytest.raises(MalformedInputError):
            eval_poly_fft([1] * 9, W8, P_SMALL)

    def test_roots_not_power_of_two(self):
        with pytest.raises(MalformedInputError):
            eval_poly_fft([1, 2], W8[:6], P_SMALL)


# =====================================================================
# 점 평가
# =====================================================================

class TestPointEvaluation:
    def test_horner(self):
        # 1 + 2x + 3x² at x = 2 → 17
        assert eval_poly([1, 2, 3], 2, 1000) == 17
        assert eval_poly([], 5, 7) == 0

    def test_lagrange_matches_coefficients(self, curve_roots):
        rng = random.Random(2)
        values = [rng.randrange(CURVE_ORDER) for _ in range(16)]
        coeffs = interpolate_ifft(values, curve_roots, CURVE_ORDER)
        z = rng.randrange(CURVE_ORDER)
        assert eval_poly_lagrange(values, z, curve_roots, CURVE_ORDER) == eval_poly(
            coeffs, z, CURVE_ORDER
        )

    def test_lagrange_matches_barycentric(self):
        values = [4, 8, 15, 16, 23, 42, 0, 1]
        for z in (2, 3, 100, 336):
            assert eval_poly_lagrange(values, z, W8, P_SMALL) == eval_poly_barycentric(
                values, z, W8, P_SMALL
            )

    def test_lagrange_at_domain_point(self):
        values = [4, 8, 15, 16, 23, 42, 0, 1]
        for i, w in enumerate(W8):
            assert eval_poly_lagrange(values, w, W8, P_SMALL) == values[i]
            assert eval_poly_barycentric(values, w, W8, P_SMALL) == values[i]

    def test_lagrange_short_values(self):
        # L₀: 첫 점에서만 1
        l0 = eval_poly_lagrange([1], 2, W8, P_SMALL)
        coeffs = interpolate_ifft([1], W8, P_SMALL)
        assert l0 == eval_poly(coeffs, 2, P_SMALL)

    def test_powers_of(self):
        assert powers_of(2, 4, 1000) == [1, 2, 4, 8]
        assert powers_of(3, 3, 7) == [1, 3, 2]
        assert powers_of(9, 0, 7) == []


# =====================================================================
# 소거 다항식 나눗셈
# =====================================================================

def _times_vanishing_plus(q, r, n, p):
    """q·(xⁿ - 1) + r 의 계수."""
    result = [0] * max(len(q) + n, len(r))
    for i, c in enumerate(q):
        result[i + n] += c
        result[i] -= c
    for i, c in enumerate(r):
        result[i] += c
    return [c % p for c in result]


class TestDivideByVanishing:
    def test_exact_division(self):
        q, r = divide_by_vanishing([-1, 0, 0, 0, 1], 4, P_SMALL)
        assert q == [1]
        assert r == [0, 0, 0, 0]

    def test_identity(self):
        rng = random.Random(3)
        f = [rng.randrange(P_SMALL) for _ in range(13)]
        q, r = divide_by_vanishing(f, 4, P_SMALL)
        assert len(q) == 9
        assert len(r) == 4
        assert _times_vanishing_plus(q, r, 4, P_SMALL) == f

    def test_multiple_of_vanishing(self):
        # (x⁴ - 1)(2 + 3x + x²) 는 나머지 없이 나누어진다
        f = _times_vanishing_plus([2, 3, 1], [], 4, CURVE_ORDER)
        q, r = divide_by_vanishing(f, 4, CURVE_ORDER)
        assert q == [2, 3, 1]
        assert not any(r)

    def test_short_dividend(self):
        q, r = divide_by_vanishing([5, 6], 4, P_SMALL)
        assert q == []
        assert r == [5, 6, 0, 0]


# =====================================================================
# 구조 헬퍼
# =====================================================================

class TestStructuralHelpers:
    def test_next_power_of_two(self):
        assert [next_power_of_two(n) for n in (0, 1, 2, 3, 4, 5, 9)] == [1, 1, 2, 4, 4, 8, 16]

    def test_is_power_of_two(self):
        assert is_power_of_two(1)
        assert is_power_of_two(16)
        assert not is_power_of_two(0)
        assert not is_power_of_two(12)

    def test_pad_length(self):
        assert pad_length([1, 2], 4) == [1, 2, 0, 0]
        assert pad_length([1], 3, fill_value=9) == [1, 9, 9]

    def test_pad_length_too_long(self):
        with pytest.raises(MalformedInputError):
            pad_length([1, 2, 3], 2)

    def test_pad_power_of_two(self):
        assert pad_power_of_two([1, 2, 3]) == [1, 2, 3, 0]
        assert pad_power_of_two([1, 2]) == [1, 2]

    def test_pad_permutation(self):
        assert pad_permutation([5, 4], 4, 4) == [5, 4, 6, 7]
        assert pad_permutation([], 2, 8) == [8, 9]

    def test_left_shift(self):
        assert left_shift([1, 2, 3, 4]) == [2, 3, 4, 1]
        assert left_shift([]) == []
