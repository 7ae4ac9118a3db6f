"""
기반 모듈: 다항식 표현 변환(FFT) 및 평가 공간 연산
=====================================================

이 모듈은 증명 엔진에서 사용되는 모든 다항식 연산을 정수 리스트 위에서 제공한다.

**두 가지 표현**:
  - 계수 표현 (coefficient form): f = [f₀, f₁, ..., f_{n-1}]
    → f(x) = f₀ + f₁·x + ... + f_{n-1}·x^{n-1}  (오름차순)
  - 평가 표현 (evaluation form): [f(W[0]), f(W[1]), ..., f(W[n-1])]
    → 고정된 단위근 리스트 W = [1, ω, ω², ...] 위의 값

  두 표현은 같은 W를 사용하는 FFT/IFFT로만 상호 변환된다.

**FFT (Number Theoretic Transform)**:
  재귀적 Cooley-Tukey radix-2. 짝수/홀수 인덱스로 분할하고,
  제곱된 단위근(W의 짝수 인덱스 부분열)으로 재귀한 뒤 버터플라이로 결합한다.

**평가 공간의 벡터 연산**:
  평가 표현에서 다항식 곱셈/나눗셈은 원소별(pointwise) 연산이다.
  (결과 차수가 |W| 미만일 때만 계수 공간의 연산과 일치한다.)

**소거 다항식 나눗셈 (divide_by_vanishing)**:
  X^n - 1 로 나누는 데 곱셈이 전혀 필요 없다. X^n ≡ 1 이기 때문이다.

사용 예시:
    >>> from ipaplonk.polynomial import eval_poly_fft, interpolate_ifft
    >>> evals = eval_poly_fft([3, 1, 4, 1], W, p)
    >>> interpolate_ifft(evals, W, p)   # [3, 1, 4, 1]
"""

from ipaplonk.errors import MalformedInputError
from ipaplonk.field import mod, mod_inverse, batch_inverse


# ─────────────────────────────────────────────────────────────────────
# 평가 공간(evaluation space)의 벡터 연산
# ─────────────────────────────────────────────────────────────────────
# 길이가 다르면 짧은 쪽을 0으로 간주한다.

def vector_mod(a, p):
    """모든 원소를 정규 대표원으로 변환한다 (음수 리터럴 정규화)."""
    return [mod(ai, p) for ai in a]


def vector_add(a, b, p):
    """원소별 덧셈 a + b."""
    n = max(len(a), len(b))
    return [mod(_at(a, i) + _at(b, i), p) for i in range(n)]


def vector_sub(a, b, p):
    """원소별 뺄셈 a - b."""
    n = max(len(a), len(b))
    return [mod(_at(a, i) - _at(b, i), p) for i in range(n)]


def vector_mul(a, b, p):
    """원소별 곱셈 a · b."""
    n = max(len(a), len(b))
    return [mod(_at(a, i) * _at(b, i), p) for i in range(n)]


def vector_div(a, b, p):
    """원소별 나눗셈 a / b (일괄 역원 사용).

    Raises:
        NonInvertibleElementError: b에 0이 있는 경우
    """
    return vector_mul(a, batch_inverse(b, p), p)


def _at(a, i):
    return a[i] if i < len(a) else 0


# ─────────────────────────────────────────────────────────────────────
# FFT / IFFT
# ─────────────────────────────────────────────────────────────────────

def eval_poly_fft(f, roots, p):
    """FFT: 계수 → 단위근 위의 평가값.

    알고리즘:
        1. f를 |W|까지 0으로 패딩 (|W|는 2의 거듭제곱)
        2. n=1이면 계수를 그대로 반환 (0차 다항식)
        3. 짝수/홀수 분리: even = [f₀, f₂, ...], odd = [f₁, f₃, ...]
        4. W의 짝수 인덱스 부분열 [1, ω², ω⁴, ...]로 재귀
        5. 버터플라이: y[i]       = even[i] + W[i]·odd[i]
                      y[i + n/2] = even[i] - W[i]·odd[i]

    Args:
        f: 계수 리스트 (길이 ≤ |W|)
        roots: 단위근 리스트 W = [1, ω, ..., ω^{n-1}]
        p: 소수 모듈러스

    Returns:
        list[int]: [f(W[0]), f(W[1]), ..., f(W[n-1])]

    Raises:
        MalformedInputError: 계수가 단위근보다 많거나 |W|가 2의 거듭제곱이 아닐 때
    """
    n = len(roots)
    if n == 0 or n & (n - 1):
        raise MalformedInputError(f"단위근 개수는 2의 거듭제곱이어야 합니다: {n}")
    if len(f) > n:
        raise MalformedInputError(
            f"다항식 길이 {len(f)}가 단위근 개수 {n}를 초과합니다"
        )
    return _fft(pad_length(f, n), roots, p)


def _fft(f, roots, p):
    n = len(f)
    if n == 1:
        return [mod(f[0], p)]

    half = n // 2
    roots_half = roots[::2]
    even_vals = _fft(f[::2], roots_half, p)
    odd_vals = _fft(f[1::2], roots_half, p)

    result = [0] * n
    for i in range(half):
        t = roots[i] * odd_vals[i]
        result[i] = mod(even_vals[i] + t, p)
        result[i + half] = mod(even_vals[i] - t, p)
    return result


def interpolate_ifft(evals, roots, p):
    """IFFT: 단위근 위의 평가값 → 계수.

    역 단위근을 따로 계산하지 않는다.
    같은 W로 FFT를 수행하면 F(ω)·F(ω) 가 인덱스 반전 i → -i mod n 에 n을 곱한
    것과 같으므로, 첫 원소를 제외한 나머지를 뒤집고 n⁻¹ 을 곱하면 된다.

        f = n⁻¹ · [y₀, y_{n-1}, y_{n-2}, ..., y₁]    (y = FFT(evals, W))

    Args:
        evals: 평가값 리스트 (길이 ≤ |W|)
        roots: 단위근 리스트 W
        p: 소수 모듈러스

    Returns:
        list[int]: 길이 |W|의 계수 리스트
    """
    y = eval_poly_fft(evals, roots, p)
    n = len(roots)
    n_inv = mod_inverse(n, p)
    reordered = [y[0]] + y[1:][::-1]
    return [c * n_inv % p for c in reordered]


# ─────────────────────────────────────────────────────────────────────
# 점 평가 (point evaluation)
# ─────────────────────────────────────────────────────────────────────

def eval_poly(f, z, p):
    """계수 표현 다항식을 z에서 평가한다 (Horner's method).

    f(z) = f₀ + z(f₁ + z(f₂ + ...))
    """
    z = mod(z, p)
    result = 0
    for coeff in reversed(f):
        result = (result * z + coeff) % p
    return result


def eval_poly_lagrange(values, z, roots, p):
    """평가 표현 다항식을 보간 없이 임의의 점 z에서 평가한다.

    Lagrange 기저를 단위근 도메인에 특화하면:
        Lᵢ(z) = ∏_{j≠i} (z - ωʲ) / ∏_{j≠i} (ωⁱ - ωʲ)
              = (ωⁱ / n) · ∏_{j≠i} (z - ωʲ)

    (분모는 (X^n - 1)' 을 ωⁱ 에서 평가한 n·ω^{i(n-1)} = n / ωⁱ 이다.)

    ∏_{j≠i} (z - ωʲ) 는 앞쪽 누적곱과 뒤쪽 누적곱의 곱으로 모든 i에 대해
    O(n)에 구한다. 역원은 n⁻¹ 한 번뿐이다.
    z가 단위근 ωᵏ와 같아도 (z - ωᵏ) 로 나누지 않으므로 정확히 values[k]가 나온다.

    Args:
        values: [f(W[0]), ..., f(W[n-1])]
        z: 평가 점
        roots: 단위근 리스트 W
        p: 소수 모듈러스

    Returns:
        int: f(z)
    """
    n = len(roots)
    values = pad_length(values, n)
    z = mod(z, p)
    diffs = [mod(z - w, p) for w in roots]

    # prefix[i] = ∏_{j<i} (z - ωʲ),  suffix[i] = ∏_{j>i} (z - ωʲ)
    prefix = [1] * n
    for i in range(1, n):
        prefix[i] = prefix[i - 1] * diffs[i - 1] % p
    suffix = [1] * n
    for i in range(n - 2, -1, -1):
        suffix[i] = suffix[i + 1] * diffs[i + 1] % p

    total = 0
    for i in range(n):
        if values[i] == 0:
            continue
        total += values[i] * roots[i] % p * prefix[i] % p * suffix[i]
    return total % p * mod_inverse(n, p) % p


def eval_poly_barycentric(values, z, roots, p):
    """Barycentric 공식으로 평가 표현 다항식을 z에서 평가한다.

        f(z) = (z^n - 1)/n · Σᵢ f(ωⁱ)·ωⁱ / (z - ωⁱ)

    z가 단위근 중 하나이면 해당 값을 그대로 반환한다.
    eval_poly_lagrange() 와의 교차 검증용이다.
    """
    n = len(roots)
    values = pad_length(values, n)
    z = mod(z, p)
    for i, w in enumerate(roots):
        if w == z:
            return mod(values[i], p)
    inverses = batch_inverse([mod(z - w, p) for w in roots], p)
    total = 0
    for i in range(n):
        total += values[i] * roots[i] % p * inverses[i]
    zh = mod(pow(z, n, p) - 1, p)
    return total % p * zh % p * mod_inverse(n, p) % p


def powers_of(z, n, modulus):
    """[1, z, z², ..., z^{n-1}] mod modulus."""
    powers = [0] * n
    zz = 1
    for i in range(n):
        powers[i] = zz
        zz = zz * z % modulus
    return powers


# ─────────────────────────────────────────────────────────────────────
# 소거 다항식 X^n - 1 로 나누기
# ─────────────────────────────────────────────────────────────────────

def divide_by_vanishing(f, n, p):
    """계수 표현 f(x)를 Z_H(x) = x^n - 1 로 나눈다 (곱셈 없음).

    최고차 계수부터 내려오며, 차수 i ≥ n 인 계수 c에 대해
        c·x^i = c·x^{i-n}·(x^n - 1) + c·x^{i-n}
    이므로 c를 몫의 i-n 자리와 나머지의 i-n 자리에 동시에 더한다.
    나머지의 i-n 자리가 다시 n 이상이면 이후 반복에서 다시 접힌다.

    Args:
        f: 피제수 계수 리스트
        n: 도메인 크기
        p: 소수 모듈러스

    Returns:
        tuple: (몫 계수 리스트, 길이 n의 나머지 계수 리스트)
               f = q·(x^n - 1) + r

    예시:
        >>> divide_by_vanishing([-1, 0, 0, 0, 1], 4, p)   # ([1], [0, 0, 0, 0])
    """
    remainder = vector_mod(f, p)
    quotient = [0] * max(len(f) - n, 0)
    for i in range(len(remainder) - 1, n - 1, -1):
        c = remainder[i]
        if c == 0:
            continue
        quotient[i - n] = (quotient[i - n] + c) % p
        remainder[i - n] = (remainder[i - n] + c) % p
        remainder[i] = 0
    return quotient, pad_length(remainder[:n], n)


# ─────────────────────────────────────────────────────────────────────
# 구조 헬퍼
# ─────────────────────────────────────────────────────────────────────

def next_power_of_two(n):
    """n 이상의 가장 작은 2의 거듭제곱을 반환한다.

    예시:
        >>> next_power_of_two(3)  # 4
        >>> next_power_of_two(4)  # 4
        >>> next_power_of_two(5)  # 8
    """
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def is_power_of_two(n):
    return n >= 1 and n & (n - 1) == 0


def pad_length(f, n, fill_value=0):
    """리스트를 길이 n까지 fill_value로 채운다.

    Raises:
        MalformedInputError: 이미 n보다 긴 경우
    """
    if n < len(f):
        raise MalformedInputError(f"길이 {len(f)}를 {n}으로 패딩할 수 없습니다")
    return list(f) + [fill_value] * (n - len(f))


def pad_power_of_two(f):
    """리스트를 다음 2의 거듭제곱 길이까지 0으로 채운다."""
    return pad_length(f, next_power_of_two(len(f)))


def pad_permutation(sigma, n, offset):
    """순열 인덱스 열을 길이 n까지 항등 원소로 확장한다.

    새로 추가되는 i번째 위치 (len(sigma) ≤ i < n) 는 자기 자신 offset + i 를 가리킨다.
    offset은 해당 열의 시작 인덱스 (j번째 열이면 j·n) 이다.

    예시:
        >>> pad_permutation([5, 4], 4, 4)   # [5, 4, 6, 7]
    """
    return list(sigma) + [offset + i for i in range(len(sigma), n)]


def left_shift(values):
    """평가 표현에서 한 칸 왼쪽으로 회전한다.

    [f(1), f(ω), ..., f(ω^{n-1})] → [f(ω), f(ω²), ..., f(1)]
    즉 x ↦ f(ω·x) 의 평가 표현이다.
    """
    return list(values[1:]) + list(values[:1])
