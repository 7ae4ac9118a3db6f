"""
공개 파라미터 Basis
====================

커밋먼트 키, 단위근, 코셋을 하나의 불변 레코드로 묶는다.
모든 commit/prove/verify 호출은 Basis를 명시적 인자로 받는다 (전역 상태 없음).

**구성 요소**:
  - p: FFT가 동작하는 소수체
  - G: 커밋먼트 키 (그룹 원소 max_degree개, 서로의 이산로그를 모름)
  - W: 2^degree_bits 차 단위근 [1, ω, ω², ...]
  - cosets / cofactors: PLONK 배선 열마다 하나씩의 서로소 코셋
  - group: G가 속한 그룹 (CurveGroup 또는 ModPGroup)
  - digest: Fiat-Shamir 챌린지 해시 (기본값: hashlib.sha512)

**두 가지 생성 방식**:
  | 메서드              | p                 | G                         |
  |---------------------|-------------------|---------------------------|
  | generate_curve      | bn128 curve_order | 랜덤 G1 점 (PLONK 가능)   |
  | generate_modp       | Pallas 소수 등    | 랜덤 Z_p* 원소 (IPA 전용) |

  PLONK은 커밋된 다항식의 계수(p를 법으로 함)를 그대로 그룹 스칼라로 쓰므로
  group.scalar_modulus == p 인 곡선 Basis만 사용할 수 있다.

seed를 주면 SHA-256 카운터 스트림으로 결정론적인 Basis를 만든다 (테스트 재현용).

사용 예시:
    >>> basis = Basis.generate_curve(degree_bits=4, seed=b"test")
    >>> basis.max_degree   # 16
"""

import hashlib
import logging
import secrets

from ipaplonk.errors import MalformedInputError
from ipaplonk.field import CURVE_ORDER
from ipaplonk.group import CurveGroup, ModPGroup
from ipaplonk import primes
from ipaplonk.primes import LARGE_PRIMES, get_all_roots_of_unity, get_cosets


logger = logging.getLogger(__name__)

DEFAULT_MAX_COLUMNS = 10


def seeded_randbytes(seed):
    """seed로부터 결정론적 바이트 스트림을 만드는 randbytes 함수를 반환한다.

    블록 i = SHA-256(seed ‖ i) 를 이어 붙인 스트림에서 차례로 잘라낸다.
    """
    if isinstance(seed, str):
        seed = seed.encode()
    elif isinstance(seed, int):
        seed = seed.to_bytes(max(1, (seed.bit_length() + 7) // 8), "big")
    buffer = bytearray()
    counter = [0]

    def randbytes(n):
        while len(buffer) < n:
            block = hashlib.sha256(seed + counter[0].to_bytes(8, "big")).digest()
            buffer.extend(block)
            counter[0] += 1
        out = bytes(buffer[:n])
        del buffer[:n]
        return out

    return randbytes


class Basis:
    """불변 공개 파라미터.

    속성:
        p: 소수 모듈러스
        byte_length: 필드 원소 하나의 직렬화 바이트 수
        G: 커밋먼트 키 (tuple)
        W: 단위근 (tuple, 길이 max_degree)
        cosets: 코셋별 근 (tuple of tuple), cosets[0] == W
        cofactors: 코셋 인자 (tuple), cofactors[0] == 1
        max_degree: 지원하는 최대 다항식 길이 (= |W|)
        max_columns: 지원하는 최대 배선 열 수 (= |cosets|)
        degree_bits: log2(max_degree)
        group: Group 구현체
        digest: 트랜스크립트 챌린지에 쓰는 hashlib 스타일 해시 생성자
    """

    def __init__(self, p, G, W, cosets, cofactors, group, byte_length=None, digest=hashlib.sha512):
        max_degree = len(W)
        if max_degree == 0 or max_degree & (max_degree - 1):
            raise MalformedInputError(f"단위근 개수는 2의 거듭제곱이어야 합니다: {max_degree}")
        if len(G) < max_degree:
            raise MalformedInputError(
                f"커밋먼트 키가 {len(G)}개로 최대 차수 {max_degree}보다 적습니다"
            )
        if len(cosets) != len(cofactors):
            raise MalformedInputError("코셋과 코셋 인자의 개수가 다릅니다")

        self.p = p
        self.byte_length = byte_length or primes.byte_length(max(p, group.scalar_modulus))
        self.G = tuple(G)
        self.W = tuple(W)
        self.cosets = tuple(tuple(c) for c in cosets)
        self.cofactors = tuple(cofactors)
        self.max_degree = max_degree
        self.max_columns = len(cosets)
        self.degree_bits = max_degree.bit_length() - 1
        self.group = group
        self.digest = digest

    def __eq__(self, other):
        if not isinstance(other, Basis):
            return NotImplemented
        return (
            self.p == other.p
            and self.byte_length == other.byte_length
            and self.group == other.group
            and self.G == other.G
            and self.W == other.W
            and self.cosets == other.cosets
            and self.cofactors == other.cofactors
            and self.digest().name == other.digest().name
        )

    def __repr__(self):
        return (
            f"Basis(group={self.group.name}, max_degree={self.max_degree}, "
            f"max_columns={self.max_columns})"
        )

    @classmethod
    def generate_curve(cls, degree_bits, max_columns=DEFAULT_MAX_COLUMNS, seed=None,
                       digest=hashlib.sha512):
        """bn128 G1 위의 Basis를 생성한다.

        Args:
            degree_bits: log2(max_degree), bn128 스칼라 필드는 최대 28까지 지원
            max_columns: 코셋 수
            seed: 결정론적 생성용 시드 (None이면 secrets 사용)
            digest: 챌린지 해시 (기본값: SHA-512)

        Returns:
            Basis: p = curve_order, G = 랜덤 G1 점 2^degree_bits 개
        """
        randbytes = secrets.token_bytes if seed is None else seeded_randbytes(seed)
        group = CurveGroup()
        p = CURVE_ORDER

        W = get_all_roots_of_unity(degree_bits, p, randbytes)
        cosets, cofactors = get_cosets(W, p, max_columns)
        G = [group.random_element(randbytes) for _ in range(len(W))]

        logger.debug("곡선 Basis 생성: max_degree=%d, max_columns=%d", len(W), max_columns)
        return cls(p, G, W, cosets, cofactors, group, byte_length=32, digest=digest)

    @classmethod
    def generate_modp(cls, degree_bits, bit_length=256, max_columns=DEFAULT_MAX_COLUMNS, seed=None,
                      digest=hashlib.sha512):
        """소수체 곱셈군 위의 Basis를 생성한다.

        Args:
            degree_bits: log2(max_degree)
            bit_length: LARGE_PRIMES에서 고를 소수의 비트 수
            max_columns: 코셋 수
            seed: 결정론적 생성용 시드
            digest: 챌린지 해시 (기본값: SHA-512)

        Raises:
            MalformedInputError: 알려진 소수가 없거나 2^degree_bits ∤ p - 1 일 때
        """
        if bit_length not in LARGE_PRIMES:
            raise MalformedInputError(
                f"{bit_length}비트 소수가 없습니다 (지원: {sorted(LARGE_PRIMES)})"
            )
        randbytes = secrets.token_bytes if seed is None else seeded_randbytes(seed)
        p = LARGE_PRIMES[bit_length]
        group = ModPGroup(p)

        W = get_all_roots_of_unity(degree_bits, p, randbytes)
        cosets, cofactors = get_cosets(W, p, max_columns)
        G = [group.random_element(randbytes) for _ in range(len(W))]

        logger.debug("mod-p Basis 생성: %d비트, max_degree=%d", bit_length, len(W))
        return cls(
            p, G, W, cosets, cofactors, group, byte_length=bit_length // 8, digest=digest
        )
