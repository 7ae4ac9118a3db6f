"""
PLONK 전처리기 (Preprocessor)
===============================

회로 구조에서 Prover와 Verifier가 공통으로 쓰는 평가 표현 데이터를 만든다.

**전처리 출력물**:
  - 도메인: n, roots = n차 단위근
  - 코셋: 열마다 하나의 n차 코셋, cofactors (k₀ = 1, k₁, k₂)
  - 셀렉터: q_l, q_r, q_o, q_m, q_c (길이 n으로 패딩, p를 법으로 정규화)
  - 순열 다항식: id_poly (항등), sigma_poly (복사 제약), 모두 평가 표현

셀렉터와 순열에는 커밋하지 않는다. Verifier도 회로를 알고 있으므로
필요한 값을 Lagrange 평가로 직접 계산한다.

사용 예시:
    >>> pre = preprocess(circuit, basis)
    >>> pre.n                 # 4
    >>> pre.sigma_poly[0][0]  # σ_a(ω⁰) = coroots[4] = k₁
"""

from ipaplonk.circuit import WIRE_COLUMNS
from ipaplonk.errors import MalformedInputError
from ipaplonk.permutation import permutation_polynomials
from ipaplonk.polynomial import vector_mod
from ipaplonk.utils import (
    identity_permutation,
    pad_many,
    pad_many_permutations,
    select_roots_subset,
)


# Round 3에서 결합 제약을 평가하는 확장 도메인의 배수 (4n)
FFT_EXPANSION_FACTOR = 4


class PreprocessedCircuit:
    """전처리된 회로 데이터.

    속성 (도메인):
        n: 도메인 크기 (2의 거듭제곱, ≥ 게이트 수)
        number_of_columns: 배선 열 수 (3)
        roots: [1, ω, ..., ω^{n-1}]
        cosets: 열별 코셋, cosets[0] == roots
        cofactors: 열별 코셋 인자
        coroots: 코셋을 이어 붙인 길이 3n 리스트

    속성 (평가 표현):
        selectors: [q_l, q_r, q_o, q_m, q_c]
        sigma: 패딩된 순열 인덱스 행
        id_poly, sigma_poly: 열별 항등/복사 순열 값
    """

    def __init__(self, n, number_of_columns, cosets, cofactors, selectors, sigma, id_poly, sigma_poly):
        self.n = n
        self.number_of_columns = number_of_columns
        self.cosets = cosets
        self.cofactors = cofactors
        self.roots = cosets[0]
        self.coroots = [root for coset in cosets for root in coset]
        self.selectors = selectors
        self.sigma = sigma
        self.id_poly = id_poly
        self.sigma_poly = sigma_poly


def preprocess(circuit, basis):
    """회로를 전처리한다.

    단계:
    1. 도메인 설정: 게이트 수 → 2의 거듭제곱 n, n차 단위근과 코셋
    2. 셀렉터: 길이 n으로 0 패딩 (패딩 게이트는 제약을 자동 만족)
    3. 순열: 항등 원소로 패딩 후 코셋 값으로 변환

    Args:
        circuit: Circuit 레코드
        basis: Basis (group.scalar_modulus == p 이어야 함)

    Returns:
        PreprocessedCircuit

    Raises:
        MalformedInputError: 그룹의 스칼라 필드가 p와 다르거나, 열 수가 3이 아니거나,
            회로가 Basis의 최대 차수/열 수를 넘을 때
    """
    p = basis.p
    if basis.group.scalar_modulus != p:
        raise MalformedInputError(
            "PLONK에는 스칼라 필드가 FFT 필드와 같은 그룹이 필요합니다 (곡선 Basis 사용)"
        )
    columns = circuit.number_of_columns
    if columns != WIRE_COLUMNS:
        raise MalformedInputError(f"배선 열은 {WIRE_COLUMNS}개여야 합니다: {columns}")

    # ── 1단계: 도메인 설정 ──
    n = circuit.n
    for row in circuit.permutation:
        if len(row) > n:
            raise MalformedInputError(f"순열 행 길이 {len(row)}가 n = {n}을 초과합니다")
        if any(not 0 <= index < columns * n for index in row):
            raise MalformedInputError("순열 인덱스가 범위를 벗어났습니다")
    if FFT_EXPANSION_FACTOR * n > basis.max_degree:
        raise MalformedInputError(
            f"n = {n} 회로에는 최대 차수 {FFT_EXPANSION_FACTOR * n} 이상의 Basis가 필요합니다"
        )
    cosets = select_roots_subset(n, columns, basis)
    cofactors = list(basis.cofactors[:columns])

    # ── 2단계: 셀렉터 ──
    selectors = [vector_mod(q, p) for q in pad_many(circuit.selectors, n)]

    # ── 3단계: 순열 다항식 ──
    sigma = pad_many_permutations(circuit.permutation, n)
    coroots = [root for coset in cosets for root in coset]
    id_poly = permutation_polynomials(identity_permutation(n, columns), coroots)
    sigma_poly = permutation_polynomials(sigma, coroots)

    return PreprocessedCircuit(n, columns, cosets, cofactors, selectors, sigma, id_poly, sigma_poly)
