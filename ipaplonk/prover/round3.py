"""
PLONK Prover Round 3: 몫 다항식 t 커밋먼트
============================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: α  (Fiat-Shamir)           │
  │  Prover → Verifier: C_tlo, C_tmi, C_thi        │
  │                                                 │
  │  입력:  α 챌린지, 모든 열, 셀렉터, 순열         │
  │  출력:  몫 다항식의 3-분할 커밋먼트              │
  └─────────────────────────────────────────────────┘

**이 라운드가 가장 복잡한 이유**:
  모든 제약(게이트 제약 + 순열 제약 + 경계 제약)을 하나의 다항식으로 결합하고,
  Z_H(x) = xⁿ - 1 로 나누어 몫 다항식 t(x)를 계산해야 한다.

**세 가지 제약 항**:

  Term 1: 게이트 제약:
    q_M·a·b + q_L·a + q_R·b + q_O·c + q_C

  Term 2: 순열 제약 (α 배수):
    z(x)·∏ⱼ (wⱼ + β·idⱼ + γ) - z(ωx)·∏ⱼ (wⱼ + β·σⱼ + γ)

  Term 3: 경계 제약 (α² 배수):
    (z(x) - 1)·L₀(x)     (z(ω⁰) = 1 강제)

**구현 방식 (평가 공간)**:
  결합 다항식의 차수는 최대 4(n-1) 이므로 n개 점에서의 곱으로는 표현되지 않는다.
  모든 열을 IFFT → 4n까지 0 패딩 → 4n차 단위근 위에서 FFT 하여 확장한 뒤
  위치별로 결합하고, 한 번의 IFFT로 계수를 얻는다.
  그다음 divide_by_vanishing 으로 나누는데, 나머지가 0이 아니면 witness가 회로를
  만족하지 않는 것이므로 즉시 실패한다 (재시도 없음).

**t 3-분할**:
  t(x) = t_lo(x) + xⁿ·t_mi(x) + x²ⁿ·t_hi(x), 각 조각은 길이 n 이다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

import logging

from ipaplonk.errors import QuotientDivisionError
from ipaplonk.ipa import commit
from ipaplonk.preprocessor import FFT_EXPANSION_FACTOR
from ipaplonk.polynomial import (
    divide_by_vanishing,
    eval_poly_fft,
    interpolate_ifft,
    left_shift,
    pad_length,
)
from ipaplonk.utils import combine_pointwise, select_roots_subset


logger = logging.getLogger(__name__)


def quotient_by_vanishing(coeffs, n, p):
    """coeffs / (xⁿ - 1) 의 몫을 반환한다.

    Raises:
        QuotientDivisionError: 나머지가 0이 아닐 때
    """
    quotient, remainder = divide_by_vanishing(coeffs, n, p)
    if any(remainder):
        raise QuotientDivisionError(
            "제약 다항식이 Z_H(x)로 나누어 떨어지지 않습니다. "
            "witness가 회로를 만족하지 않습니다."
        )
    return quotient


def execute(state):
    """Round 3을 실행한다.

    Args:
        state: ProverState. Round 1, 2의 결과를 읽고 quotient_chunks와 커밋먼트를 기록한다.
    """
    # ── 1. α 챌린지 생성 ──
    state.alpha = state.transcript.challenge()
    logger.debug("Round 3: alpha 도출")

    p = state.p
    n = state.n
    pre = state.pre
    alpha, beta, gamma = state.alpha, state.beta, state.gamma
    columns = pre.number_of_columns

    # ── 2. 4n 도메인으로 확장 ──
    factor = FFT_EXPANSION_FACTOR
    expanded_roots = select_roots_subset(factor * n, columns, state.basis)[0]

    def fft_expand(evals):
        coeffs = interpolate_ifft(evals, pre.roots, p)
        return eval_poly_fft(pad_length(coeffs, factor * n), expanded_roots, p)

    x_witness = [fft_expand(w) for w in state.witness]
    x_selectors = [fft_expand(q) for q in pre.selectors]
    x_id = [fft_expand(v) for v in pre.id_poly]
    x_sigma = [fft_expand(v) for v in pre.sigma_poly]

    # z(ω·x) 는 평가 표현에서 한 칸 회전
    z_shifted = left_shift(state.z)
    l0 = [1] + [0] * (n - 1)
    x_z, x_z_shifted, x_l0 = [fft_expand(v) for v in (state.z, z_shifted, l0)]

    # ── 3. 제약 항 계산 (위치별) ──
    def gate(w, q):
        a, b, c = w
        q_l, q_r, q_o, q_m, q_c = q
        return (a * b * q_m + a * q_l + b * q_r + c * q_o + q_c) % p

    def permutation(zs, w, ids, sigmas):
        z, z_next = zs
        num, den = 1, 1
        for j in range(columns):
            num = num * (w[j] + beta * ids[j] + gamma) % p
            den = den * (w[j] + beta * sigmas[j] + gamma) % p
        return (z * num - z_next * den) % p

    def permutation_start(zl):
        z, l0_value = zl
        return (z - 1) * l0_value % p

    gate_eq = combine_pointwise(gate, x_witness, x_selectors)
    permutation_eq = combine_pointwise(permutation, [x_z, x_z_shifted], x_witness, x_id, x_sigma)
    permutation_start_eq = combine_pointwise(permutation_start, [x_z, x_l0])

    alpha2 = alpha * alpha % p
    full_eq = [
        (e1 + alpha * e2 + alpha2 * e3) % p
        for e1, e2, e3 in zip(gate_eq, permutation_eq, permutation_start_eq)
    ]

    # ── 4. Z_H(x)로 나누기 ──
    full_eq_coeffs = interpolate_ifft(full_eq, expanded_roots, p)
    quotient = pad_length(quotient_by_vanishing(full_eq_coeffs, n, p), 3 * n)

    # ── 5. t 3-분할 + 커밋 ──
    state.quotient_chunks = [quotient[k * n:(k + 1) * n] for k in range(3)]
    state.transcript.append(*(commit(t, state.basis) for t in state.quotient_chunks))
