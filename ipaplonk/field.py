"""
기반 모듈: 모듈러 산술 커널 (Modular Arithmetic Kernel)
=========================================================

이 모듈은 증명 엔진 전체에서 사용되는 정수 기반 모듈러 산술을 정의한다.
모든 값은 Python 정수(int)이며, 함수는 항상 정규 대표원 [0, p) 를 반환한다.

**왜 FQ 객체가 아닌 정수인가?**
  같은 코드가 서로 다른 모듈러스에서 동작해야 한다:
  - 소수체 p (FFT, PLONK, 곡선 그룹의 스칼라)
  - p - 1 (곱셈군 Z_p* 변형에서 지수/스칼라 공간)
  - 작은 교육용 소수 (예: p = 337)
  그래서 모듈러스를 인자로 받는 순수 함수로 구성한다.

**일괄 역원 (Batch Inversion)**:
  n개의 원소를 역변환할 때 모듈러 역원 1번 + O(n) 곱셈만 사용한다.
  barycentric 평가, 순열 누적자의 분모 등 역원이 많이 필요한 곳에서 쓰인다.

사용 예시:
    >>> from ipaplonk.field import mod, mod_exp, mod_inverse
    >>> mod(-5, 7)            # 2
    >>> mod_exp(3, 4, 7)      # 81 mod 7 = 4
    >>> mod_inverse(3, 7)     # 5  (3·5 = 15 ≡ 1)
"""

from py_ecc import bn128

from ipaplonk.errors import MalformedInputError, NonInvertibleElementError


# bn128 스칼라 필드의 위수. 곡선 그룹 변형의 Basis는 이 소수 위에서 동작한다.
# r - 1 = 2^28 × m (m 홀수) → 최대 2^28차 단위근을 지원
CURVE_ORDER = bn128.curve_order


def mod(x, p):
    """정규 대표원 x mod p ∈ [0, p) 를 반환한다.

    Python의 % 연산자는 양의 모듈러스에 대해 이미 음이 아닌 값을 반환하지만,
    음수 리터럴(예: 테스트의 -5)이 내부로 흘러들지 않도록
    모든 입력 경로는 이 함수를 거친다.
    """
    return x % p


def mod_exp(base, exponent, p):
    """빠른 모듈러 거듭제곱 base^exponent mod p (square-and-multiply).

    p가 소수라고 가정하므로 페르마 소정리에 의해 지수를 먼저 p - 1 로 축소한다.
    음수 지수도 이 축소로 처리된다 (a^(-k) = a^(p-1-k)).

    Args:
        base: 밑
        exponent: 지수 (음수 허용)
        p: 소수 모듈러스

    Returns:
        int: base^exponent mod p

    예시:
        >>> mod_exp(2, 10, 1000003)   # 1024
        >>> mod_exp(3, -1, 7)         # 5 (3의 역원)
    """
    base = mod(base, p)
    exponent = mod(exponent, p - 1)
    result = 1
    while exponent > 0:
        if exponent & 1:
            result = result * base % p
        base = base * base % p
        exponent >>= 1
    return result


def mod_exp_no_prime(base, exponent, q):
    """모듈러스 q가 소수라고 가정하지 않는 거듭제곱 base^exponent mod q.

    Miller-Rabin 검사처럼 q의 소수성을 아직 모르는 곳에서 사용한다.
    지수를 축소하지 않으므로 음수 지수는 허용되지 않는다.

    Raises:
        MalformedInputError: exponent < 0
    """
    if exponent < 0:
        raise MalformedInputError(f"지수는 음수일 수 없습니다: {exponent}")
    base = mod(base, q)
    result = 1
    while exponent > 0:
        if exponent & 1:
            result = result * base % q
        base = base * base % q
        exponent >>= 1
    return result


def mod_inverse(a, p):
    """확장 유클리드 알고리즘으로 모듈러 역원 a^(-1) mod p 를 계산한다.

    불변식: 루프 내내 x·a₀ ≡ b, u·a₀ ≡ a (mod p) 가 유지되고,
    a가 0이 되었을 때 b = gcd(a₀, p) 이다.

    Args:
        a: 역변환할 원소
        p: 모듈러스

    Returns:
        int: a·a^(-1) ≡ 1 (mod p) 인 정규 대표원

    Raises:
        NonInvertibleElementError: a ≡ 0 이거나 gcd(a, p) ≠ 1

    예시:
        >>> mod_inverse(3, 7)   # 5
        >>> mod_inverse(0, 7)   # NonInvertibleElementError
    """
    a = mod(a, p)
    if a == 0:
        raise NonInvertibleElementError("0은 역변환할 수 없습니다")
    b = p
    x, y, u, v = 0, 1, 1, 0
    while a != 0:
        q, r = divmod(b, a)
        m = x - u * q
        n = y - v * q
        b, a = a, r
        x, y, u, v = u, v, m, n
    if b != 1:
        raise NonInvertibleElementError(f"역원이 존재하지 않습니다 (gcd = {b})")
    return mod(x, p)


def batch_inverse(values, p):
    """일괄 역원: [a₀, a₁, ...] → [a₀⁻¹, a₁⁻¹, ...].

    Montgomery 트릭:
        1. 누적곱 prods[i] = a₀·a₁·…·a_{i-1} 을 앞에서부터 계산
        2. 전체 곱 a₀·…·a_{n-1} 을 한 번만 역변환
        3. 뒤에서부터 걸어가며 aᵢ⁻¹ = prods[i] · (a₀·…·aᵢ)⁻¹ 를 꺼내고,
           (a₀·…·aᵢ)⁻¹ · aᵢ = (a₀·…·a_{i-1})⁻¹ 로 한 단계씩 벗겨낸다

    비용: 역원 1회 + 곱셈 약 3n회

    Args:
        values: 0이 아닌 원소 리스트
        p: 소수 모듈러스

    Returns:
        list[int]: 각 원소의 역원

    Raises:
        NonInvertibleElementError: 어떤 원소가 0인 경우 (전체 곱이 0이 됨)
    """
    n = len(values)
    prods = [0] * n
    prod = 1
    for i in range(n):
        prods[i] = prod
        prod = prod * values[i] % p

    inv_prod = mod_inverse(prod, p)

    inverses = [0] * n
    for i in range(n - 1, -1, -1):
        inverses[i] = prods[i] * inv_prod % p
        inv_prod = inv_prod * values[i] % p
    return inverses
