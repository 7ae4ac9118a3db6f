"""
PLONK Verifier
================

PLONK 증명(Snark)을 검증한다.

**검증 과정**:
  1. 트랜스크립트 앞부분에서 챌린지 복원
     - β, γ: 배선 커밋먼트만 (+ 0 / + 1)
     - α:    배선 커밋먼트 + C_z
     - ζ:    전체 (몫 커밋먼트까지)
  2. 모든 IPA 열기 증명 검증 (ζ에서 7개, ζ·ω에서 z 1개)
  3. Z_H(ζ), L₀(ζ), 셀렉터(ζ), id(ζ), σ(ζ)를 회로로부터 Lagrange 평가로 계산
  4. 결합 항등식 확인:

       gate + α·perm + α²·(z - 1)·L₀  ==  Z_H(ζ)·(t_lo + ζⁿ·t_mi + ζ²ⁿ·t_hi)

  n ≥ 2 이면 id_j(ζ) = k_j·ζ 이지만, n = 1 도메인에서는 id_j가 상수 k_j로 보간되므로
  항등 순열도 σ와 같이 평가 표현에서 Lagrange 평가한다.

**실패 보고**:
  형식이 잘못되었거나 항등식이 성립하지 않는 증명은 예외 없이 False를 반환한다.
  회로 자체의 오류(MalformedInputError)는 호출자의 잘못이므로 그대로 전파된다.

사용 예시:
    >>> from ipaplonk.verifier import verify
    >>> verify(circuit, snark, basis)   # True
"""

import logging

from ipaplonk.ipa import Opening, validate_eval
from ipaplonk.polynomial import eval_poly_lagrange
from ipaplonk.preprocessor import preprocess
from ipaplonk.transcript import hash_transcript
from ipaplonk.utils import vanishing_poly_eval


logger = logging.getLogger(__name__)

QUOTIENT_CHUNKS = 3


def verify(circuit, snark, basis):
    """PLONK 증명을 검증한다.

    Args:
        circuit: Circuit 레코드
        snark: Snark (prover.prove()의 결과)
        basis: 곡선 Basis

    Returns:
        bool: 검증 성공 여부
    """
    pre = preprocess(circuit, basis)
    p = basis.p
    n = pre.n
    columns = pre.number_of_columns
    roots = pre.roots

    reason = _malformed_reason(snark, columns, basis.group)
    if reason is not None:
        logger.debug("PLONK 증명 거부: %s", reason)
        return False

    transcript = list(snark.transcript)

    # ── Step 1: 챌린지 복원 ──
    transcript1 = transcript[:columns]
    beta = hash_transcript(transcript1 + [0], basis)
    gamma = hash_transcript(transcript1 + [1], basis)
    alpha = hash_transcript(transcript[:columns + 1], basis)
    zeta = hash_transcript(transcript, basis)

    # ── Step 2: ζ에서의 열기 증명 검증 ──
    openings = list(snark.witness_evals) + [snark.z_eval] + list(snark.quotient_evals)
    for i, (commitment, opening) in enumerate(zip(transcript, openings)):
        if not validate_eval(commitment, zeta, opening.fz, opening.proof, basis):
            logger.debug("PLONK 증명 거부: 열기 증명 %d 실패", i)
            return False

    omega = roots[1] if n > 1 else 1
    zeta_shifted = zeta * omega % p
    z_shifted = snark.z_shifted_eval
    if not validate_eval(transcript[columns], zeta_shifted, z_shifted.fz, z_shifted.proof, basis):
        logger.debug("PLONK 증명 거부: z(ζω) 열기 증명 실패")
        return False

    # ── Step 3: 공개 다항식 평가 ──
    zeta_n = pow(zeta, n, p)
    zh = vanishing_poly_eval(n, zeta, p)
    l0 = eval_poly_lagrange([1] + [0] * (n - 1), zeta, roots, p)
    q_l, q_r, q_o, q_m, q_c = [eval_poly_lagrange(q, zeta, roots, p) for q in pre.selectors]
    ids = [eval_poly_lagrange(i, zeta, roots, p) for i in pre.id_poly]
    sigmas = [eval_poly_lagrange(s, zeta, roots, p) for s in pre.sigma_poly]

    # ── Step 4: 결합 항등식 ──
    a, b, c = [opening.fz % p for opening in snark.witness_evals]
    wires = (a, b, c)
    z = snark.z_eval.fz % p
    z_next = z_shifted.fz % p
    t_lo, t_mi, t_hi = [opening.fz % p for opening in snark.quotient_evals]

    gate = a * b * q_m + a * q_l + b * q_r + c * q_o + q_c

    num, den = z, z_next
    for j in range(columns):
        num = num * (wires[j] + beta * ids[j] + gamma) % p
        den = den * (wires[j] + beta * sigmas[j] + gamma) % p
    permutation = num - den

    permutation_start = (z - 1) * l0

    lhs = (gate + alpha * permutation + alpha * alpha * permutation_start) % p
    rhs = zh * (t_lo + zeta_n * t_mi + zeta_n * zeta_n * t_hi) % p
    if lhs != rhs:
        logger.debug("PLONK 증명 거부: 결합 항등식 불일치")
        return False
    return True


def _malformed_reason(snark, columns, group):
    for name in ("transcript", "witness_evals", "z_eval", "z_shifted_eval", "quotient_evals"):
        if not hasattr(snark, name):
            return f"{name} 없음"
    sequences = (snark.transcript, snark.witness_evals, snark.quotient_evals)
    if not all(isinstance(s, (list, tuple)) for s in sequences):
        return "커밋먼트/열기 목록이 리스트가 아님"
    if len(snark.transcript) != columns + 1 + QUOTIENT_CHUNKS:
        return f"커밋먼트 {len(snark.transcript)}개, {columns + 1 + QUOTIENT_CHUNKS}개 필요"
    if not all(group.is_element(c) for c in snark.transcript):
        return "커밋먼트가 그룹 원소가 아님"
    if len(snark.witness_evals) != columns:
        return f"배선 열기 {len(snark.witness_evals)}개, {columns}개 필요"
    if len(snark.quotient_evals) != QUOTIENT_CHUNKS:
        return f"몫 열기 {len(snark.quotient_evals)}개, {QUOTIENT_CHUNKS}개 필요"
    openings = list(snark.witness_evals) + list(snark.quotient_evals)
    openings += [snark.z_eval, snark.z_shifted_eval]
    if not all(isinstance(o, Opening) and isinstance(o.fz, int) for o in openings):
        return "Opening 형식 오류"
    return None
