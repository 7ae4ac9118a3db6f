"""
PLONK Prover: 라운드별 프로토콜 오케스트레이터
=================================================

PLONK 증명 생성의 전체 흐름을 관리한다.

**라운드 구조**:
  각 라운드의 출력은 다음 챌린지를 뽑기 전에 트랜스크립트에 추가된다.

  ┌─────────────────────────────────────────────────────┐
  │  Round 1: 배선(witness) 다항식 커밋                  │
  │  Prover → Verifier: C_a, C_b, C_c                   │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: 순열 누적자 z 커밋                         │
  │  Verifier → Prover: β, γ  (Fiat-Shamir)            │
  │  Prover → Verifier: C_z                             │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: 몫 다항식 t 커밋                           │
  │  Verifier → Prover: α  (Fiat-Shamir)               │
  │  Prover → Verifier: C_tlo, C_tmi, C_thi             │
  ├─────────────────────────────────────────────────────┤
  │  Round 4: IPA 열기 증명                              │
  │  Verifier → Prover: ζ  (Fiat-Shamir)               │
  │  Prover → Verifier: a(ζ), b(ζ), c(ζ), z(ζ), z(ζω), │
  │                     t_lo(ζ), t_mi(ζ), t_hi(ζ) + 증명 │
  └─────────────────────────────────────────────────────┘

사용 예시:
    >>> from ipaplonk.prover import prove
    >>> snark = prove(circuit, witness, basis)
"""

import logging

from ipaplonk.preprocessor import preprocess
from ipaplonk.prover import round1, round2, round3, round4
from ipaplonk.transcript import Transcript


logger = logging.getLogger(__name__)


class Snark:
    """PLONK 증명 데이터 컨테이너.

    속성:
        transcript: 커밋먼트 리스트 [C_a, C_b, C_c, C_z, C_tlo, C_tmi, C_thi]
        witness_evals: 배선 열별 Opening (ζ에서)
        z_eval: z의 Opening (ζ에서)
        z_shifted_eval: z의 Opening (ζ·ω에서)
        quotient_evals: t_lo, t_mi, t_hi의 Opening (ζ에서)
    """

    def __init__(self, transcript, witness_evals, z_eval, z_shifted_eval, quotient_evals):
        self.transcript = transcript
        self.witness_evals = witness_evals
        self.z_eval = z_eval
        self.z_shifted_eval = z_shifted_eval
        self.quotient_evals = quotient_evals

    def __eq__(self, other):
        if not isinstance(other, Snark):
            return NotImplemented
        return (
            list(self.transcript) == list(other.transcript)
            and list(self.witness_evals) == list(other.witness_evals)
            and self.z_eval == other.z_eval
            and self.z_shifted_eval == other.z_shifted_eval
            and list(self.quotient_evals) == list(other.quotient_evals)
        )

    def __repr__(self):
        return f"Snark(commitments={len(self.transcript)})"


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    각 라운드 함수는 이 객체를 읽고 결과를 기록한다.

    속성 (입력):
        pre: PreprocessedCircuit
        basis: Basis
        witness: 열별 배선 값 (Round 1에서 패딩/정규화)
        transcript: Fiat-Shamir 트랜스크립트

    속성 (라운드 간 생성):
        witness_coeffs: 배선 다항식 계수 (Round 1)
        z, z_coeffs: 순열 누적자 평가값/계수 (Round 2)
        quotient_chunks: [t_lo, t_mi, t_hi] 계수 (Round 3)
        beta, gamma, alpha, zeta: 챌린지 값들

    속성 (출력):
        witness_evals, z_eval, z_shifted_eval, quotient_evals: Opening (Round 4)
    """

    def __init__(self, circuit, witness, basis):
        self.circuit = circuit
        self.pre = preprocess(circuit, basis)
        self.basis = basis
        self.p = basis.p
        self.n = self.pre.n
        self.witness = witness
        self.transcript = Transcript(basis)

        self.witness_coeffs = None
        self.z = None
        self.z_coeffs = None
        self.quotient_chunks = None

        self.beta = None
        self.gamma = None
        self.alpha = None
        self.zeta = None

        self.witness_evals = None
        self.z_eval = None
        self.z_shifted_eval = None
        self.quotient_evals = None

    def build_snark(self):
        """최종 증명 객체를 반환한다."""
        return Snark(
            list(self.transcript),
            self.witness_evals,
            self.z_eval,
            self.z_shifted_eval,
            self.quotient_evals,
        )


def prove(circuit, witness, basis):
    """PLONK 프로토콜을 실행하여 증명을 생성한다.

    Args:
        circuit: Circuit 레코드
        witness: [a, b, c] 열별 배선 값 (음수 허용, p를 법으로 정규화됨)
        basis: 곡선 Basis

    Returns:
        Snark: PLONK 증명

    Raises:
        MalformedInputError: 회로/witness 형식 오류
        NonInvertibleElementError: 순열 누적자의 분모가 0일 때
        QuotientDivisionError: witness가 회로를 만족하지 않을 때

    예시 (3² + 4² = 5²):
        >>> circuit, witness = pythagorean_triple()
        >>> basis = Basis.generate_curve(4, seed=b"demo")
        >>> snark = prove(circuit, witness, basis)
    """
    state = ProverState(circuit, witness, basis)
    logger.debug("PLONK 증명 시작: n=%d", state.n)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 1: 배선(witness) 다항식 커밋                  │
    # └─────────────────────────────────────────────────────┘
    round1.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 2: β, γ → 순열 누적자 z 커밋                  │
    # └─────────────────────────────────────────────────────┘
    round2.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 3: α → t = C / Z_H → 3분할 커밋              │
    # └─────────────────────────────────────────────────────┘
    round3.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 4: ζ → 모든 다항식의 IPA 열기 증명            │
    # └─────────────────────────────────────────────────────┘
    round4.execute(state)

    return state.build_snark()
