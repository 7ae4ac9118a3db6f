"""
오류 분류 (Error Taxonomy)
============================

증명 엔진 전체에서 사용하는 예외 클래스.

  - MalformedInputError: 호출 시점에 바로 드러나는 입력 형식 오류
    (2의 거듭제곱이 아닌 길이, Basis가 지원하는 최대 차수/열 수 초과 등)
  - NonInvertibleElementError: 0의 모듈러 역원 (회로/witness 관계가 깨졌음을 의미)
  - QuotientDivisionError: 소거 다항식 X^n - 1 로 나눈 나머지가 0이 아님
    (witness가 회로 제약을 만족하지 않음)

검증 실패(VerificationFailure)는 예외가 아니다.
validate_eval()과 verify()는 잘못된 증명에 대해 False를 반환한다.
"""


class MalformedInputError(ValueError):
    """길이, 차수, 열 수 등 입력의 구조적 전제 조건 위반."""


class NonInvertibleElementError(ZeroDivisionError):
    """역원이 존재하지 않는 원소(0)를 역변환하려 했다."""


class QuotientDivisionError(ValueError):
    """결합 제약 다항식이 X^n - 1 로 나누어 떨어지지 않는다."""
