"""
그룹 추상화 (Group Abstraction)
=================================

커밋먼트는 "스칼라 × 그룹 원소"의 합으로 만들어진다.
같은 IPA/PLONK 코드가 두 가지 그룹 위에서 동작하도록 하나의 인터페이스를 둔다.

  | 구현          | scalar_mul(s, G)   | add(G, H)     | 항등원  | 스칼라 모듈러스 |
  |---------------|--------------------|---------------|---------|-----------------|
  | ModPGroup     | G^s mod p          | G·H mod p     | 1       | p - 1           |
  | CurveGroup    | s·G (bn128 G1)     | 점 덧셈       | None    | curve_order     |

**다중 스칼라 합 (inner-product commitment)**:
  ⟨s, G⟩ = Σᵢ scalar_mul(sᵢ, Gᵢ)
  커밋먼트의 핵심 연산이다.

**곡선 그룹 원소의 표현**:
  py_ecc bn128 G1 점은 (FQ(x), FQ(y)) 튜플이고, 무한원점은 None이다.
  bn128.multiply는 None이나 스칼라 0을 처리하지 못하므로 먼저 걸러낸다.

**랜덤 곡선 점 (try-and-increment)**:
  x를 무작위로 고르고 y² = x³ + 3 의 제곱근이 존재할 때까지 x를 1씩 증가시킨다.
  이렇게 만든 점들 사이의 이산로그는 아무도 모른다 (IPA 기저의 전제 조건).
  bn128 G1의 cofactor는 1이므로 곡선 위의 모든 점이 위수 r의 부분군에 속한다.

사용 예시:
    >>> group = CurveGroup()
    >>> P = group.scalar_mul(5, bn128.G1)
    >>> group.inner_product_commit([1, 2], [P, bn128.G1])
"""

import secrets

from py_ecc import bn128

from ipaplonk.errors import MalformedInputError
from ipaplonk.field import mod, mod_exp
from ipaplonk.primes import byte_length, random_big_int_length


class Group:
    """커밋먼트 그룹의 공통 인터페이스.

    하위 클래스는 scalar_mul, add, coordinates, is_element, random_element를 구현한다.
    벡터 연산과 inner_product_commit은 이 기본 연산으로 정의된다.

    속성:
        name: 직렬화용 그룹 종류 ("modp" 또는 "curve")
        identity: 항등원
        scalar_modulus: 스칼라(지수) 공간의 모듈러스
        coordinate_count: 직렬화 시 원소 하나가 차지하는 정수의 수
    """

    name = None
    identity = None
    scalar_modulus = None
    coordinate_count = 1

    def scalar_mul(self, scalar, element):
        raise NotImplementedError

    def add(self, *elements):
        raise NotImplementedError

    def coordinates(self, element):
        """해싱용 좌표 정수 리스트."""
        raise NotImplementedError

    def is_element(self, element):
        raise NotImplementedError

    def random_element(self, randbytes=secrets.token_bytes):
        raise NotImplementedError

    def equals(self, left, right):
        return left == right

    def scalar_mul_vector(self, scalar, elements):
        """[s·G₀, s·G₁, ...]"""
        return [self.scalar_mul(scalar, element) for element in elements]

    def add_vectors(self, left, right):
        """[G₀ + H₀, G₁ + H₁, ...]"""
        return [self.add(g, h) for g, h in zip(left, right)]

    def inner_product_commit(self, scalars, elements):
        """다중 스칼라 합 ⟨s, G⟩ = Σᵢ sᵢ·Gᵢ.

        Raises:
            MalformedInputError: 스칼라가 그룹 원소보다 많을 때
        """
        if len(scalars) > len(elements):
            raise MalformedInputError(
                f"스칼라 {len(scalars)}개에 그룹 원소가 {len(elements)}개뿐입니다"
            )
        total = self.identity
        for scalar, element in zip(scalars, elements):
            total = self.add(total, self.scalar_mul(scalar, element))
        return total


class ModPGroup(Group):
    """소수체의 곱셈군 Z_p*.

    스칼라 곱은 모듈러 거듭제곱, 덧셈은 모듈러 곱셈이다.
    지수는 p - 1 을 법으로 다루므로 scalar_modulus = p - 1 이다.
    """

    name = "modp"
    identity = 1

    def __init__(self, p):
        self.p = p
        self.scalar_modulus = p - 1
        self.byte_length = byte_length(p)

    def scalar_mul(self, scalar, element):
        return mod_exp(element, scalar, self.p)

    def add(self, *elements):
        total = 1
        for element in elements:
            total = total * element % self.p
        return total

    def coordinates(self, element):
        return [element]

    def is_element(self, element):
        return isinstance(element, int) and 0 < element < self.p

    def random_element(self, randbytes=secrets.token_bytes):
        while True:
            x = mod(random_big_int_length(self.byte_length, False, randbytes), self.p)
            if x > 1:
                return x

    def __eq__(self, other):
        return isinstance(other, ModPGroup) and other.p == self.p

    def __repr__(self):
        return f"ModPGroup(p={self.p})"


class CurveGroup(Group):
    """bn128 G1 타원곡선 그룹 (py_ecc).

    스칼라 필드는 curve_order (r), 좌표 필드는 field_modulus (q) 이다.
    """

    name = "curve"
    identity = None
    scalar_modulus = bn128.curve_order
    coordinate_count = 2
    field_modulus = bn128.field_modulus
    byte_length = 32

    def scalar_mul(self, scalar, element):
        scalar = mod(scalar, self.scalar_modulus)
        if scalar == 0 or element is None:
            return None
        return bn128.multiply(element, scalar)

    def add(self, *elements):
        total = None
        for element in elements:
            total = bn128.add(total, element)
        return total

    def coordinates(self, element):
        # 무한원점은 (0, 0)으로 직렬화 (곡선 위의 점이 아님)
        if element is None:
            return [0, 0]
        x, y = element
        return [int(x.n), int(y.n)]

    def is_element(self, element):
        if element is None:
            return True
        if not isinstance(element, tuple) or len(element) != 2:
            return False
        if not all(isinstance(c, bn128.FQ) for c in element):
            return False
        return bn128.is_on_curve(element, bn128.b)

    def to_point(self, x, y):
        """좌표 정수 쌍 → G1 점.

        Raises:
            MalformedInputError: 곡선 위의 점이 아닐 때
        """
        point = (bn128.FQ(x), bn128.FQ(y))
        if not bn128.is_on_curve(point, bn128.b):
            raise MalformedInputError(f"곡선 위의 점이 아닙니다: ({x}, {y})")
        return point

    def random_element(self, randbytes=secrets.token_bytes):
        """try-and-increment 방식의 랜덤 곡선 점.

        q ≡ 3 (mod 4) 이므로 제곱근은 rhs^((q+1)/4) 한 번으로 구한다.
        """
        q = self.field_modulus
        x = mod(random_big_int_length(self.byte_length, False, randbytes), q)
        while True:
            rhs = (x * x * x + 3) % q
            y = pow(rhs, (q + 1) // 4, q)
            if y * y % q == rhs:
                return (bn128.FQ(x), bn128.FQ(y))
            x = (x + 1) % q

    def __eq__(self, other):
        return isinstance(other, CurveGroup)

    def __repr__(self):
        return "CurveGroup(bn128)"
