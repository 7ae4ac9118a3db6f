"""
Fiat-Shamir Transcript
========================

비대화식(non-interactive) 변환을 위한 챌린지 도출.

**Fiat-Shamir 변환이란?**
  원래 IPA와 PLONK는 대화식(interactive) 프로토콜이다:
  - Prover가 커밋먼트를 보내면
  - Verifier가 랜덤 챌린지를 보내고
  - Prover가 응답한다

  Fiat-Shamir 변환은 이 대화를 해시 함수로 시뮬레이션한다:
  - 트랜스크립트 = 지금까지 주고받은 필드/그룹 원소의 순서 있는 리스트
  - 다음 챌린지 = hash(트랜스크립트의 앞부분)
  - Verifier는 같은 앞부분을 해싱하여 챌린지를 직접 재계산한다 (증명이 준 값을 믿지 않음)

**직렬화 규칙** (Prover와 Verifier가 반드시 일치해야 함):
  - 정수(필드 원소): byte_length 바이트 리틀엔디안, 0으로 패딩
  - 그룹 원소: group.coordinates()의 각 좌표를 같은 폭으로 이어 붙임
    (mod-p 그룹은 원소 자체, 곡선 그룹은 (x, y), 무한원점은 (0, 0))

**챌린지**:
  basis.digest (기본값 SHA-512) 다이제스트를 리틀엔디안 부호 없는 정수로 읽고
  group.scalar_modulus (곡선: r, mod-p: p - 1) 로 축소한다.

사용 예시:
    >>> t = Transcript(basis)
    >>> t.append(commitment_a, commitment_b)
    >>> beta = t.challenge(0)
    >>> gamma = t.challenge(1)
"""


def transcript_to_bytes(elements, basis):
    """트랜스크립트 원소들을 고정 폭 바이트열로 직렬화한다."""
    width = basis.byte_length
    group = basis.group
    out = bytearray()
    for element in elements:
        if isinstance(element, int):
            values = [element]
        else:
            values = group.coordinates(element)
        for value in values:
            out.extend(value.to_bytes(width, "little"))
    return bytes(out)


def hash_transcript(elements, basis, digest=None):
    """트랜스크립트를 해싱하여 챌린지 스칼라를 도출한다.

    Args:
        elements: 필드/그룹 원소의 순서 있는 시퀀스
        basis: 직렬화 폭과 그룹을 제공하는 Basis
        digest: hashlib 스타일 해시 생성자 (None이면 basis.digest)

    Returns:
        int: [0, scalar_modulus) 범위의 챌린지
    """
    digest = digest or basis.digest
    h = digest(transcript_to_bytes(elements, basis)).digest()
    return int.from_bytes(h, "little") % basis.group.scalar_modulus


class Transcript:
    """추가만 가능한(append-only) 트랜스크립트.

    증명/검증 세션마다 새로 만들고 세션이 끝나면 버린다.
    챌린지를 뽑아도 상태는 바뀌지 않는다. 다음 챌린지가 달라지려면 원소를 추가해야 한다.
    """

    def __init__(self, basis, elements=()):
        self.basis = basis
        self.elements = list(elements)

    def append(self, *elements):
        self.elements.extend(elements)

    def challenge(self, *extra):
        """현재 원소 + extra (트랜스크립트에는 추가하지 않음) 의 해시."""
        return hash_transcript(self.elements + list(extra), self.basis)

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)
