"""
파라미터 생성: 소수 판정, 단위근, 코셋
========================================

Basis 생성에 필요한 수론적 도구를 제공한다. 증명/검증 경로에서는 쓰이지 않는다.

**Miller-Rabin 소수 판정**:
  1. 처음 1000개의 작은 소수로 시행 나눗셈 (명백한 합성수를 싸게 거른다)
  2. n - 1 = 2^r · d (d 홀수) 로 분해
  3. 랜덤 증인 a ∈ [2, n-2] 에 대해 x = a^d mod n 을 계산하고,
     x ∈ {1, n-1} 이거나 r-1번 이내의 제곱으로 n-1 에 도달하면 통과
  4. 어떤 증인도 n-1 에 도달하지 못하면 즉시 합성수

**원시 2^k차 단위근**:
  2^k | p - 1 일 때 랜덤 x에 대해 w = x^((p-1)/2^k) 는 위수가 2^k 의 약수인 원소다.
  w^(2^(k-1)) ≠ 1 이면 위수가 정확히 2^k 이다.

**코셋 (Coset)**:
  PLONK의 각 배선 열은 서로 겹치지 않는 인덱스 공간이 필요하다.
  k·H 와 k'·H 가 같은 코셋일 필요충분조건은 (k/k')^N = 1 이므로,
  작은 정수 k = 2, 3, ... 중 기존 모든 인자와 이 조건을 피하는 것만 고른다.

난수 소스는 `randbytes(n) -> bytes` 형태의 호출 가능 객체로 주입한다
(기본값: secrets.token_bytes). 바이트열은 리틀엔디안 정수로 해석한다.

사용 예시:
    >>> miller_rabin_is_odd_prime(LARGE_PRIMES[256])   # True
    >>> W = get_all_roots_of_unity(4, LARGE_PRIMES[256])
    >>> cosets, cofactors = get_cosets(W, LARGE_PRIMES[256], 3)
"""

import logging
import secrets

from ipaplonk.errors import MalformedInputError
from ipaplonk.field import mod, mod_exp, mod_exp_no_prime, mod_inverse


logger = logging.getLogger(__name__)

MILLER_RABIN_ROUNDS = 10

# Miller-Rabin으로 찾은 큰 소수.
# 256비트는 Pallas 소수: 2^32 | p - 1 이므로 2^32차까지의 단위근이 존재한다.
LARGE_PRIMES = {
    256: 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001,
    512: int(
        "7635864884812004142213145685301029448842881628344592815941449459"
        "274259914524547966108634212485176614061528107597724921441853616604"
        "056938042089748208144233"
    ),
}


def _first_primes(count):
    """에라토스테네스의 체로 처음 count개의 소수를 구한다."""
    limit = 8 * count
    while True:
        sieve = bytearray([1]) * (limit + 1)
        sieve[0:2] = b"\x00\x00"
        for i in range(2, int(limit ** 0.5) + 1):
            if sieve[i]:
                sieve[i * i::i] = bytearray(len(sieve[i * i::i]))
        primes = [i for i in range(limit + 1) if sieve[i]]
        if len(primes) >= count:
            return primes[:count]
        limit *= 2


SMALL_PRIMES = _first_primes(1000)


def byte_length(n):
    """n을 표현하는 데 필요한 바이트 수."""
    return max(1, (n.bit_length() + 7) // 8)


# ─────────────────────────────────────────────────────────────────────
# 랜덤 정수
# ─────────────────────────────────────────────────────────────────────

def random_big_int_length(length, enforce_full_length=True, randbytes=secrets.token_bytes):
    """length 바이트의 랜덤 정수를 생성한다 (리틀엔디안).

    enforce_full_length가 참이면 최상위 바이트의 최상위 비트를 켜서
    결과가 정확히 8·length 비트가 되도록 한다.
    """
    data = bytearray(randbytes(length))
    if enforce_full_length and data[-1] < 128:
        data[-1] += 128
    return int.from_bytes(bytes(data), "little")


def random_big_int_range(low, high, randbytes=secrets.token_bytes):
    """[low, high] 범위의 균등한 랜덤 정수 (거부 샘플링)."""
    span = high - low
    if span < 0:
        raise MalformedInputError(f"빈 범위입니다: [{low}, {high}]")
    length = byte_length(span)
    while True:
        n = int.from_bytes(randbytes(length), "little")
        if n <= span:
            return low + n


# ─────────────────────────────────────────────────────────────────────
# 소수
# ─────────────────────────────────────────────────────────────────────

def miller_rabin_is_odd_prime(n, rounds=MILLER_RABIN_ROUNDS, randbytes=secrets.token_bytes):
    """Miller-Rabin 확률적 소수 판정.

    Args:
        n: 검사할 정수
        rounds: 랜덤 증인의 수 (합성수를 놓칠 확률 ≤ 4^(-rounds))
        randbytes: 난수 소스

    Returns:
        bool: "아마도 소수"이면 True, 합성수이면 False
    """
    if n in (2, 3):
        return True
    if n < 2:
        return False
    for small in SMALL_PRIMES:
        if n % small == 0 and n > small:
            return False

    # n - 1 = 2^r · d, d 홀수
    d = n - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for _ in range(rounds):
        a = random_big_int_range(2, n - 2, randbytes)
        x = mod_exp_no_prime(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def random_large_prime(length, randbytes=secrets.token_bytes):
    """length 바이트 길이의 랜덤 소수를 찾는다."""
    attempts = 0
    while True:
        attempts += 1
        candidate = random_big_int_length(length, randbytes=randbytes)
        if miller_rabin_is_odd_prime(candidate, randbytes=randbytes):
            logger.debug("%d바이트 소수 발견 (시도 %d회)", length, attempts)
            return candidate


# ─────────────────────────────────────────────────────────────────────
# 단위근과 코셋
# ─────────────────────────────────────────────────────────────────────

def random_root_of_unity(k, p, randbytes=secrets.token_bytes):
    """원시 2^k차 단위근을 하나 찾는다.

    Args:
        k: 지수 (≥ 1)
        p: 소수 모듈러스
        randbytes: 난수 소스

    Returns:
        int: 위수가 정확히 2^k 인 원소 w

    Raises:
        MalformedInputError: k < 1 이거나 2^k 가 p - 1 을 나누지 않을 때
            (이 경우 탐색은 끝나지 않으므로 즉시 거부한다)
    """
    if k < 1:
        raise MalformedInputError(f"k는 1 이상이어야 합니다: {k}")
    m, rest = divmod(p - 1, 1 << k)
    if rest != 0:
        raise MalformedInputError(f"2^{k}가 p - 1을 나누지 않아 단위근을 찾을 수 없습니다")
    n_half = 1 << (k - 1)
    length = byte_length(p)
    while True:
        x = mod(random_big_int_length(length, enforce_full_length=False, randbytes=randbytes), p)
        if x == 0:
            continue
        w = mod_exp(x, m, p)
        if mod_exp(w, n_half, p) != 1:
            # w^(2^(k-1)) 은 -1 이어야 한다
            return w


def get_all_roots_of_unity(k, p, randbytes=secrets.token_bytes):
    """원시 2^k차 단위근 w 로 전체 부분군 [1, w, w², ..., w^(2^k - 1)] 을 만든다."""
    w = random_root_of_unity(k, p, randbytes)
    n = 1 << k
    roots = [0] * n
    wi = 1
    for i in range(n):
        roots[i] = wi
        wi = wi * w % p
    return roots


def get_cosets(roots, p, max_columns):
    """서로 겹치지 않는 max_columns개의 코셋 k·H 를 만든다.

    Args:
        roots: 부분군 H = [1, ω, ..., ω^(N-1)]
        p: 소수 모듈러스
        max_columns: 필요한 코셋의 수

    Returns:
        tuple: (cosets, cofactors)
            - cofactors[0] = 1 (H 자신), 이후는 작은 정수 2, 3, ... 중 선택
            - cosets[j] = [cofactors[j]·ω^i for i in range(N)]
    """
    n = len(roots)
    cofactors = [1]
    candidate = 2
    while len(cofactors) < max_columns:
        if candidate >= p:
            raise MalformedInputError(f"{max_columns}개의 코셋을 만들 수 없습니다")
        if all(mod_exp(candidate * mod_inverse(c, p), n, p) != 1 for c in cofactors):
            cofactors.append(candidate)
        candidate += 1
    cosets = [[k * w % p for w in roots] for k in cofactors]
    return cosets, cofactors
