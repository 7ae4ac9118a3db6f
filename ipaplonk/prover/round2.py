"""
PLONK Prover Round 2: 순열 누적자 z 커밋먼트
==============================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: β, γ  (Fiat-Shamir)        │
  │  Prover → Verifier: C_z                         │
  └─────────────────────────────────────────────────┘

**챌린지**:
  β = hash(배선 커밋먼트 ‖ 0),  γ = hash(배선 커밋먼트 ‖ 1)
  (0, 1은 해시 입력에만 붙고 트랜스크립트에는 남지 않는다)

**순열 누적자**:
  z(ω⁰) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · ∏ⱼ (wⱼ + β·idⱼ + γ) / ∏ⱼ (wⱼ + β·σⱼ + γ)

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

import logging

from ipaplonk.ipa import commit
from ipaplonk.permutation import compute_accumulator
from ipaplonk.polynomial import interpolate_ifft


logger = logging.getLogger(__name__)


def execute(state):
    """Round 2를 실행한다.

    Args:
        state: ProverState. Round 1의 결과를 읽고 z, z_coeffs와 C_z를 기록한다.
    """
    # ── 1. β, γ 챌린지 생성 (Fiat-Shamir) ──
    state.beta = state.transcript.challenge(0)
    state.gamma = state.transcript.challenge(1)
    logger.debug("Round 2: beta, gamma 도출")

    # ── 2. 순열 누적자 z 계산 ──
    pre = state.pre
    state.z = compute_accumulator(
        state.witness, pre.id_poly, pre.sigma_poly,
        state.beta, state.gamma, state.p,
    )

    # ── 3. IFFT + 커밋 ──
    state.z_coeffs = interpolate_ifft(state.z, pre.roots, state.p)
    state.transcript.append(commit(state.z_coeffs, state.basis))
