"""
Inner Product Argument (IPA) 다항식 커밋먼트
=============================================

신뢰 설정(trusted setup) 없이 다항식 f를 커밋하고, f(z) = v 를 로그 크기 증명으로 여는 방식.

**커밋 (Pedersen 벡터 커밋먼트)**:
  C = ⟨f, G⟩ = f₀·G₀ + f₁·G₁ + ... + f_{n-1}·G_{n-1}
  Gᵢ 사이의 이산로그를 아무도 모르므로 C는 f에 바인딩된다.

**평가 주장**:
  a = f (계수), b = [1, z, z², ...] 이면 f(z) = ⟨a, b⟩.
  즉 "커밋된 벡터 a와 공개 벡터 b의 내적이 v이다"를 증명하면 된다.

**접기 (folding), log₂(n) 라운드**:
  ┌───────────────────────────────────────────────────────────┐
  │  a, b, G를 절반으로 나눈다: (alo, ahi), (blo, bhi), (Glo, Ghi)│
  │  교차항:  LA = ⟨alo, Ghi⟩    RA = ⟨ahi, Glo⟩               │
  │           Lab = ⟨alo, bhi⟩   Rab = ⟨ahi, blo⟩              │
  │  트랜스크립트에 [LA, RA, Lab, Rab] 추가 → x = hash(...)    │
  │  a' = alo + x·ahi                                          │
  │  b' = x·blo + bhi                                          │
  │  G' = x·Glo + Ghi                                          │
  └───────────────────────────────────────────────────────────┘

  ⟨a', G'⟩ = x·⟨a, G⟩ + LA + x²·RA 이고 ⟨a', b'⟩ = x·⟨a, b⟩ + Lab + x²·Rab 이다.
  따라서 Verifier는 A ← x·A + LA + x²·RA, v ← x·v + Lab + x²·Rab 로
  커밋먼트와 주장값을 같이 접을 수 있다.

**최종 검사**:
  길이 1까지 접히면 Prover는 스칼라 a 하나만 보낸다.
  원래 위치 j가 최종 생성자에 기여하는 계수 xProd[j] 는
  "j가 하위 절반에 속한 라운드의 x"들의 곱이다.
  G' = ⟨xProd, G⟩, b' = ⟨xProd, [1, z, z², ...]⟩ 를 다시 계산하여
    A == a·G'  그리고  v == a·b'
  를 확인한다.

모든 스칼라 연산은 basis.group.scalar_modulus 를 법으로 한다.

사용 예시:
    >>> C = commit(f, basis)
    >>> fz, proof = prove_eval(f, z, basis)
    >>> validate_eval(C, z, fz, proof, basis)   # True
"""

import logging

from ipaplonk.errors import MalformedInputError
from ipaplonk.polynomial import (
    is_power_of_two,
    pad_power_of_two,
    powers_of,
    vector_mod,
)
from ipaplonk.transcript import hash_transcript


logger = logging.getLogger(__name__)


class EvaluationProof:
    """평가 증명.

    속성:
        a: 최종 스칼라
        transcript: 라운드마다 [LA, RA, Lab, Rab] 4개씩, 총 4·log₂(length)개
        length: 원래 벡터 길이 (2의 거듭제곱)
    """

    def __init__(self, a, transcript, length):
        self.a = a
        self.transcript = transcript
        self.length = length

    def __eq__(self, other):
        if not isinstance(other, EvaluationProof):
            return NotImplemented
        return (
            self.a == other.a
            and list(self.transcript) == list(other.transcript)
            and self.length == other.length
        )

    def __repr__(self):
        return f"EvaluationProof(a={self.a}, length={self.length}, rounds={len(self.transcript) // 4})"


class Opening:
    """평가값 fz 와 그 증명의 묶음 (PLONK Snark 안에서 사용)."""

    def __init__(self, fz, proof):
        self.fz = fz
        self.proof = proof

    def __eq__(self, other):
        if not isinstance(other, Opening):
            return NotImplemented
        return self.fz == other.fz and self.proof == other.proof

    def __repr__(self):
        return f"Opening(fz={self.fz}, proof={self.proof!r})"


def inner_product(f, g, modulus):
    """필드 내적 ⟨f, g⟩."""
    total = 0
    for fi, gi in zip(f, g):
        total += fi * gi
    return total % modulus


def commit(f, basis):
    """계수 벡터 f의 커밋먼트 ⟨f, G[:len(f)]⟩.

    같은 f와 Basis에 대해 항상 같은 값을 돌려주는 순수 함수다.
    뒤쪽의 0 계수는 항등원을 더할 뿐이므로 2의 거듭제곱으로 패딩한 벡터와 커밋먼트가 같다.

    Raises:
        MalformedInputError: len(f) > basis.max_degree
    """
    if len(f) > basis.max_degree:
        raise MalformedInputError(
            f"다항식 길이 {len(f)}가 최대 차수 {basis.max_degree}를 초과합니다"
        )
    group = basis.group
    scalars = vector_mod(f, group.scalar_modulus)
    return group.inner_product_commit(scalars, basis.G[:len(scalars)])


def prove_eval(f, z, basis):
    """f(z)의 평가 증명을 생성한다.

    Args:
        f: 계수 리스트 (2의 거듭제곱으로 패딩됨)
        z: 평가 점
        basis: Basis

    Returns:
        tuple: (fz, EvaluationProof)
    """
    group = basis.group
    q = group.scalar_modulus

    a = pad_power_of_two(vector_mod(f, q))
    length = len(a)
    if length > basis.max_degree:
        raise MalformedInputError(
            f"다항식 길이 {length}가 최대 차수 {basis.max_degree}를 초과합니다"
        )
    G = list(basis.G[:length])
    b = powers_of(z % q, length, q)
    fz = inner_product(a, b, q)

    transcript = []
    n = length
    while n > 1:
        half = n // 2
        alo, ahi = a[:half], a[half:]
        blo, bhi = b[:half], b[half:]
        Glo, Ghi = G[:half], G[half:]

        LA = group.inner_product_commit(alo, Ghi)
        RA = group.inner_product_commit(ahi, Glo)
        Lab = inner_product(alo, bhi, q)
        Rab = inner_product(ahi, blo, q)

        transcript.extend([LA, RA, Lab, Rab])
        x = hash_transcript(transcript, basis)

        a = [(lo + x * hi) % q for lo, hi in zip(alo, ahi)]
        b = [(x * lo + hi) % q for lo, hi in zip(blo, bhi)]
        G = group.add_vectors(group.scalar_mul_vector(x, Glo), Ghi)
        n = half

    return fz, EvaluationProof(a[0], transcript, length)


def validate_eval(commitment, z, fz, proof, basis):
    """평가 증명을 검증한다.

    모든 챌린지 x를 트랜스크립트 앞부분에서 다시 계산한다.
    형식이 잘못된 증명도 예외 없이 False를 반환한다 (증명은 신뢰할 수 없는 입력).

    Args:
        commitment: commit(f, basis)
        z: 평가 점
        fz: 주장된 f(z)
        proof: EvaluationProof
        basis: Basis

    Returns:
        bool: 검증 성공 여부
    """
    group = basis.group
    q = group.scalar_modulus

    reason = _malformed_reason(commitment, fz, proof, basis)
    if reason is not None:
        logger.debug("평가 증명 거부: %s", reason)
        return False

    length = proof.length
    transcript = list(proof.transcript)
    A = commitment
    v = fz % q
    x_prod = [1] * length

    i = 0
    half = length >> 1
    while half > 0:
        LA, RA, Lab, Rab = transcript[4 * i:4 * i + 4]
        x = hash_transcript(transcript[:4 * i + 4], basis)
        x2 = x * x % q
        for j in range(length):
            if not j & half:
                x_prod[j] = x_prod[j] * x % q
        A = group.add(group.scalar_mul(x, A), LA, group.scalar_mul(x2, RA))
        v = (x * v + Lab + x2 * Rab) % q
        i += 1
        half >>= 1

    G = group.inner_product_commit(x_prod, basis.G[:length])
    b = inner_product(x_prod, powers_of(z % q, length, q), q)

    if not group.equals(A, group.scalar_mul(proof.a, G)):
        logger.debug("평가 증명 거부: 커밋먼트 검사 실패")
        return False
    if v != proof.a * b % q:
        logger.debug("평가 증명 거부: 내적 검사 실패")
        return False
    return True


def _malformed_reason(commitment, fz, proof, basis):
    group = basis.group
    q = group.scalar_modulus
    if not isinstance(proof, EvaluationProof):
        return "EvaluationProof가 아님"
    length = proof.length
    if not isinstance(length, int) or not is_power_of_two(length):
        return f"길이가 2의 거듭제곱이 아님: {length!r}"
    if length > basis.max_degree:
        return f"길이 {length}가 최대 차수 초과"
    rounds = length.bit_length() - 1
    if not isinstance(proof.transcript, (list, tuple)):
        return "교차항이 리스트가 아님"
    transcript = list(proof.transcript)
    if len(transcript) != 4 * rounds:
        return f"교차항 {len(transcript)}개, {4 * rounds}개 필요"
    for i, element in enumerate(transcript):
        if i % 4 < 2:
            if not group.is_element(element):
                return f"교차항 {i}가 그룹 원소가 아님"
        elif not _is_scalar(element, q):
            return f"교차항 {i}가 스칼라가 아님"
    if not _is_scalar(proof.a, q) or not isinstance(fz, int):
        return "스칼라 형식 오류"
    if not group.is_element(commitment):
        return "커밋먼트가 그룹 원소가 아님"
    return None


def _is_scalar(value, modulus):
    return isinstance(value, int) and 0 <= value < modulus
