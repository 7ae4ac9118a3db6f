"""
PLONK Prover Round 1: 배선(Witness) 다항식 커밋먼트
=====================================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: C_a, C_b, C_c               │
  │                                                 │
  │  입력:  배선 값 (a, b, c), 단위근, Basis         │
  │  출력:  3개의 IPA 커밋먼트                       │
  └─────────────────────────────────────────────────┘

**과정**:
  1. witness 열을 길이 n으로 0 패딩하고 p를 법으로 정규화
  2. IFFT로 계수 표현 복원: a(ωⁱ) = aᵢ 인 다항식 a(x)
  3. 커밋: C_a = ⟨a, G⟩

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

import logging

from ipaplonk.errors import MalformedInputError
from ipaplonk.ipa import commit
from ipaplonk.polynomial import interpolate_ifft, vector_mod
from ipaplonk.utils import pad_many


logger = logging.getLogger(__name__)


def execute(state):
    """Round 1을 실행한다.

    Args:
        state: ProverState. witness를 읽고 witness_coeffs와 커밋먼트를 기록한다.
    """
    pre = state.pre
    p = state.p

    if len(state.witness) != pre.number_of_columns:
        raise MalformedInputError(
            f"witness 열 {len(state.witness)}개, 회로 열 {pre.number_of_columns}개"
        )
    state.witness = [vector_mod(w, p) for w in pad_many(state.witness, state.n)]

    state.witness_coeffs = [interpolate_ifft(w, pre.roots, p) for w in state.witness]
    commitments = [commit(coeffs, state.basis) for coeffs in state.witness_coeffs]
    state.transcript.append(*commitments)
    logger.debug("Round 1: 배선 커밋 %d개", len(commitments))
