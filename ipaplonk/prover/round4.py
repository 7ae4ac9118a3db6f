"""
PLONK Prover Round 4: IPA 열기 증명
=====================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: ζ  (Fiat-Shamir)           │
  │  Prover → Verifier: 8개의 (평가값, IPA 증명)    │
  └─────────────────────────────────────────────────┘

**이 라운드의 목적**:
  Verifier가 선택한 랜덤 점 ζ에서 각 다항식의 값을 "열어서" 보여준다.
  Schwartz-Zippel 보조정리에 의해, 랜덤 점에서 항등식이 성립하면
  도메인 전체에서 성립할 확률이 매우 높다.

**여는 다항식들**:
  1. a(ζ), b(ζ), c(ζ)        배선 다항식
  2. z(ζ)                     순열 누적자
  3. t_lo(ζ), t_mi(ζ), t_hi(ζ)   몫 조각
  4. z(ζ·ω)                   순열 제약의 z(ω·x) 항

  셀렉터와 순열 다항식은 회로에서 Verifier가 직접 계산하므로 열지 않는다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

import logging

from ipaplonk.ipa import Opening, prove_eval


logger = logging.getLogger(__name__)


def execute(state):
    """Round 4를 실행한다.

    Args:
        state: ProverState. Round 1~3의 계수를 읽고 Opening들을 기록한다.
    """
    # ── 1. ζ 챌린지 생성 ──
    state.zeta = state.transcript.challenge()
    zeta = state.zeta
    basis = state.basis
    logger.debug("Round 4: zeta 도출")

    def open_at(coeffs, point):
        return Opening(*prove_eval(coeffs, point, basis))

    # ── 2. ζ에서 열기 ──
    state.witness_evals = [open_at(coeffs, zeta) for coeffs in state.witness_coeffs]
    state.z_eval = open_at(state.z_coeffs, zeta)
    state.quotient_evals = [open_at(t, zeta) for t in state.quotient_chunks]

    # ── 3. ζ·ω에서 z 열기 ──
    omega = state.pre.roots[1] if state.n > 1 else 1
    state.z_shifted_eval = open_at(state.z_coeffs, zeta * omega % state.p)
