"""
PLONK 공유 유틸리티
===================

여러 PLONK 모듈에서 공유되는 구조적 헬퍼 함수를 제공한다.

**주요 기능**:
  - select_roots_subset: Basis의 최대 크기 코셋에서 n차 근과 그 코셋을 뽑기
  - identity_permutation: 항등 순열 행 [j·n + i]
  - pad_many / pad_many_permutations: 여러 열을 한 번에 길이 n으로 패딩
  - combine_pointwise: 여러 평가 벡터를 위치별로 결합
  - vanishing_poly_eval: 소거 다항식 Z_H(ζ) = ζ^n - 1 평가

**근 부분집합 선택**:
  Basis.W 는 N = max_degree 차 단위근이다. d | N 일 때
  ω^(N/d) 는 원시 d차 단위근이므로 매 (N/d)번째 원소를 취하면 d차 단위근 [1, ω', ω'², ...] 이 된다.
  코셋 k·H_N 에서도 같은 방식으로 k·H_d 를 얻는다.
"""

from ipaplonk.errors import MalformedInputError
from ipaplonk.field import mod_exp
from ipaplonk.polynomial import is_power_of_two, pad_length, pad_permutation


def select_roots_subset(degree, columns, basis):
    """d = degree 차 단위근과 그 코셋들을 Basis에서 고른다.

    Args:
        degree: 원하는 도메인 크기 (2의 거듭제곱)
        columns: 필요한 코셋(열) 수
        basis: Basis

    Returns:
        list[list[int]]: columns개의 코셋, 첫 번째가 단위근 자체

    Raises:
        MalformedInputError: degree가 2의 거듭제곱이 아니거나,
            max_degree 또는 max_columns를 초과할 때
    """
    if not is_power_of_two(degree):
        raise MalformedInputError(f"도메인 크기는 2의 거듭제곱이어야 합니다: {degree}")
    if columns > basis.max_columns:
        raise MalformedInputError(
            f"최대 {basis.max_columns}개의 열만 지원합니다: {columns}"
        )
    if degree > basis.max_degree:
        raise MalformedInputError(
            f"최대 차수 {basis.max_degree}까지만 지원합니다: {degree}"
        )
    step = basis.max_degree // degree
    return [list(coset[::step]) for coset in basis.cosets[:columns]]


def identity_permutation(n, columns):
    """항등 순열 행: j번째 열의 i번째 위치 → j·n + i."""
    return [[j * n + i for i in range(n)] for j in range(columns)]


def pad_many(columns, n, fill_value=0):
    """각 열을 길이 n까지 fill_value로 채운다."""
    return [pad_length(column, n, fill_value) for column in columns]


def pad_many_permutations(rows, n):
    """각 순열 행을 길이 n까지 항등 원소로 채운다 (j번째 행의 offset = j·n)."""
    return [pad_permutation(row, n, j * n) for j, row in enumerate(rows)]


def combine_pointwise(combine, *args):
    """여러 평가 벡터 묶음을 위치별로 결합한다.

    args의 각 원소는 같은 길이 벡터들의 리스트이다.
    위치 i에서 combine([v[i] for v in args[0]], [v[i] for v in args[1]], ...) 를 계산한다.

    예시:
        >>> combine_pointwise(lambda ab: ab[0] * ab[1], [[1, 2], [3, 4]])   # [3, 8]
    """
    length = len(args[0][0])
    return [combine(*([vector[i] for vector in arg] for arg in args)) for i in range(length)]


def vanishing_poly_eval(n, zeta, p):
    """소거 다항식 Z_H(ζ) = ζ^n - 1 을 평가한다.

    Z_H(x) = x^n - 1 은 도메인 H = {1, ω, ..., ω^(n-1)} 위에서 0이 되는 다항식이다.
    """
    return (mod_exp(zeta, n, p) - 1) % p
