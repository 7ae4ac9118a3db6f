"""
PLONK 순열 인자 (Permutation Argument)
========================================

배선 복사 제약(copy constraint)을 순열(permutation)로 인코딩하고,
Grand Product 논증으로 증명하는 모듈.

**배경: 왜 순열이 필요한가?**
  PLONK 게이트는 독립적으로 q_L·a + q_R·b + q_O·c + q_M·a·b + q_C = 0을
  만족하지만, 서로 다른 게이트 간에 "같은 값"을 강제할 방법이 없다.
  해결: 배선 위치에 순열 σ를 정의하고 "w_{σ(i)} = wᵢ for all i"를 Grand Product로 증명한다.

**코셋으로 위치에 이름 붙이기**:
  j번째 열의 i번째 위치 (평탄화 인덱스 j·n + i) 를 코셋 원소 k_j·ωⁱ 로 표현한다:
  - a 배선: {ω⁰, ω¹, ..., ω^{n-1}}          (k₀ = 1)
  - b 배선: {k₁·ω⁰, ..., k₁·ω^{n-1}}
  - c 배선: {k₂·ω⁰, ..., k₂·ω^{n-1}}
  코셋들을 이어 붙인 coroots 에서 인덱스 하나로 값을 찾는다.
  id_j(ωⁱ) = coroots[j·n + i] = k_j·ωⁱ,   σ_j(ωⁱ) = coroots[σ_j[i]]

**Grand Product (순열 누적자 z)**:
  z(ω⁰) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · ∏ⱼ (wⱼ(ωⁱ) + β·id_j(ωⁱ) + γ) / ∏ⱼ (wⱼ(ωⁱ) + β·σⱼ(ωⁱ) + γ)
  순열이 지켜지면 전체 곱이 1로 돌아온다.
"""

from ipaplonk.field import batch_inverse


def permutation_polynomials(rows, coroots):
    """순열 인덱스 행들을 코셋 값(평가 표현)으로 바꾼다."""
    return [[coroots[index] for index in row] for row in rows]


def compute_accumulator(witness, id_poly, sigma_poly, beta, gamma, p):
    """순열 누적자 z의 평가값을 계산한다.

    분모들을 한 번의 일괄 역원으로 처리한다 (역원 n번 대신 1번).

    Args:
        witness: 열별 배선 값 (각 길이 n, p를 법으로 정규화됨)
        id_poly: 열별 항등 순열 평가값
        sigma_poly: 열별 σ 평가값
        beta, gamma: 챌린지
        p: 소수 모듈러스

    Returns:
        list[int]: [z(ω⁰)=1, z(ω¹), ..., z(ω^{n-1})]

    Raises:
        NonInvertibleElementError: 어떤 분모가 0일 때
    """
    n = len(witness[0])
    columns = len(witness)
    numerators = [1] * (n - 1)
    denominators = [1] * (n - 1)
    for i in range(n - 1):
        num, den = 1, 1
        for j in range(columns):
            w = witness[j][i]
            num = num * (w + beta * id_poly[j][i] + gamma) % p
            den = den * (w + beta * sigma_poly[j][i] + gamma) % p
        numerators[i] = num
        denominators[i] = den

    inverses = batch_inverse(denominators, p)
    z = [1] * n
    for i in range(n - 1):
        z[i + 1] = z[i] * numerators[i] % p * inverses[i] % p
    return z
