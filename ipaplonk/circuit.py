"""
PLONK 회로 표현 (Circuit Representation)
==========================================

PLONK 산술화(arithmetization) 시스템의 핵심: 계산을 게이트와 배선으로 표현.

**PLONK 게이트 구조**:
  각 게이트는 3개의 배선(wire) a, b, c와 5개의 셀렉터(selector)로 구성:

    q_M·(a·b) + q_L·a + q_R·b + q_O·c + q_C = 0

**게이트 유형별 셀렉터 설정**:
  | 유형      | q_L | q_R | q_O | q_M | q_C | 의미         |
  |-----------|-----|-----|-----|-----|-----|--------------|
  | 곱셈      |  0  |  0  | -1  |  1  |  0  | a·b = c      |
  | 덧셈      |  1  |  1  | -1  |  0  |  0  | a + b = c    |
  | 상수덧셈  |  1  |  0  | -1  |  0  |  k  | a + k = c    |
  | 상수단언  |  1  |  0  |  0  |  0  | -k  | a = k        |
  | 패딩      |  0  |  0  |  0  |  0  |  0  | (항상 만족)  |

**배선(Copy) 제약과 순열**:
  배선 위치는 (열, 게이트) 쌍이며 평탄화된 인덱스 열·n + 게이트 로 번호를 매긴다
  (a의 i번째 = i, b의 i번째 = n+i, c의 i번째 = 2n+i).
  같은 값을 가져야 하는 위치들은 순열 σ의 한 순환(cycle)을 이룬다.
  Circuit.permutation 은 σ를 열별로 자른 3개의 인덱스 행이다.

**예제 회로 "PLONK by hand"**: 3² + 4² = 5²
  | 게이트 | 유형 | a | b  | c  |
  |--------|------|---|----|----|
  | 0      | mul  | 3 | 3  | 9  |
  | 1      | mul  | 4 | 4  | 16 |
  | 2      | mul  | 5 | 5  | 25 |
  | 3      | add  | 9 | 16 | 25 |

사용 예시:
    >>> circuit, witness = pythagorean_triple()
    >>> circuit.permutation
    [[4, 5, 6, 8], [0, 1, 2, 9], [3, 7, 11, 10]]
"""

from ipaplonk.errors import MalformedInputError
from ipaplonk.polynomial import next_power_of_two


# 게이트당 배선 수 (a, b, c)
WIRE_COLUMNS = 3
# 셀렉터 순서
SELECTOR_NAMES = ("q_l", "q_r", "q_o", "q_m", "q_c")


class Gate:
    """PLONK 산술 게이트.

    게이트 방정식: q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0
    """

    def __init__(self, q_l, q_r, q_o, q_m, q_c):
        self.q_l = q_l
        self.q_r = q_r
        self.q_o = q_o
        self.q_m = q_m
        self.q_c = q_c

    def selectors(self):
        return (self.q_l, self.q_r, self.q_o, self.q_m, self.q_c)

    def check(self, a, b, c, p):
        """게이트 제약이 p를 법으로 만족되는지 확인한다."""
        result = self.q_l * a + self.q_r * b + self.q_o * c + self.q_m * a * b + self.q_c
        return result % p == 0

    def __repr__(self):
        return "Gate(q_l={}, q_r={}, q_o={}, q_m={}, q_c={})".format(*self.selectors())


class Circuit:
    """PLONK 회로 레코드.

    속성:
        selectors: [q_l, q_r, q_o, q_m, q_c] 각각 게이트별 값의 리스트 (평가 표현)
        permutation: 열별 순열 인덱스 행 [σ_a, σ_b, σ_c]
        circuit_length: 게이트 수 (패딩 전)

    n = next_power_of_two(circuit_length) 이며, 짧은 열은 전처리에서 패딩된다.
    """

    def __init__(self, selectors, permutation, circuit_length=None):
        if len(selectors) != len(SELECTOR_NAMES):
            raise MalformedInputError(
                f"셀렉터는 {len(SELECTOR_NAMES)}개여야 합니다: {len(selectors)}"
            )
        self.selectors = [list(q) for q in selectors]
        self.permutation = [list(row) for row in permutation]
        if circuit_length is None:
            circuit_length = len(self.selectors[0])
        self.circuit_length = circuit_length

    @property
    def number_of_columns(self):
        return len(self.permutation)

    @property
    def n(self):
        """패딩된 도메인 크기."""
        return next_power_of_two(self.circuit_length)

    def gates(self):
        """게이트별 Gate 객체 리스트 (패딩 전)."""
        return [
            Gate(*(q[i] if i < len(q) else 0 for q in self.selectors))
            for i in range(self.circuit_length)
        ]

    def failing_gates(self, witness, p):
        """게이트 제약을 만족하지 않는 게이트 인덱스 리스트.

        Args:
            witness: [a, b, c] 열별 배선 값
            p: 소수 모듈러스
        """
        a, b, c = (list(column) + [0] * (self.circuit_length - len(column)) for column in witness)
        return [
            i for i, gate in enumerate(self.gates())
            if not gate.check(a[i], b[i], c[i], p)
        ]

    def __eq__(self, other):
        if not isinstance(other, Circuit):
            return NotImplemented
        return (
            self.selectors == other.selectors
            and self.permutation == other.permutation
            and self.circuit_length == other.circuit_length
        )

    def __repr__(self):
        return f"Circuit(circuit_length={self.circuit_length}, columns={self.number_of_columns})"


class CircuitBuilder:
    """게이트와 배선 복사 제약을 쌓아 Circuit을 만든다.

    속성:
        gates: Gate 객체 리스트
        copy_constraints: (gate1, wire1, gate2, wire2) 튜플 리스트
            - 게이트 gate1의 wire1번째 배선 == 게이트 gate2의 wire2번째 배선
            - wire: 0=a(왼쪽), 1=b(오른쪽), 2=c(출력)
    """

    def __init__(self):
        self.gates = []
        self.copy_constraints = []

    def add_gate(self, q_l, q_r, q_o, q_m, q_c):
        """임의의 셀렉터로 게이트를 추가하고 그 인덱스를 반환한다."""
        self.gates.append(Gate(q_l, q_r, q_o, q_m, q_c))
        return len(self.gates) - 1

    def add_multiplication_gate(self):
        """곱셈 게이트: a · b = c."""
        return self.add_gate(0, 0, -1, 1, 0)

    def add_addition_gate(self):
        """덧셈 게이트: a + b = c."""
        return self.add_gate(1, 1, -1, 0, 0)

    def add_constant_gate(self, constant):
        """상수 덧셈 게이트: a + constant = c."""
        return self.add_gate(1, 0, -1, 0, constant)

    def add_assert_constant_gate(self, constant):
        """상수 단언 게이트: a = constant (b, c는 자유)."""
        return self.add_gate(1, 0, 0, 0, -constant)

    def add_copy_constraint(self, gate1, wire1, gate2, wire2):
        """배선 복사 제약 추가: 게이트1.wire1 == 게이트2.wire2.

        예시:
            >>> builder.add_copy_constraint(0, 2, 1, 0)  # 게이트0.c == 게이트1.a
        """
        for gate, wire in ((gate1, wire1), (gate2, wire2)):
            if not 0 <= wire < WIRE_COLUMNS:
                raise MalformedInputError(f"배선 번호는 0, 1, 2 중 하나여야 합니다: {wire}")
            if not 0 <= gate < len(self.gates):
                raise MalformedInputError(f"존재하지 않는 게이트입니다: {gate}")
        self.copy_constraints.append((gate1, wire1, gate2, wire2))

    def build_permutation(self, n):
        """배선 순열 σ를 구성한다.

        초기값은 항등 순열 σ(i) = i 이다.
        복사 제약마다 두 위치가 속한 순환을 하나로 합친다:
        서로 다른 순환의 두 원소에서 σ 값을 맞바꾸면 두 순환이 이어진다.
        이미 같은 순환이면 맞바꾸면 오히려 쪼개지므로 건너뛴다.

        Returns:
            list[list[int]]: 열별로 자른 길이 n의 인덱스 행 3개
        """
        sigma = list(range(WIRE_COLUMNS * n))
        for g1, w1, g2, w2 in self.copy_constraints:
            pos1 = w1 * n + g1
            pos2 = w2 * n + g2
            if _same_cycle(sigma, pos1, pos2):
                continue
            sigma[pos1], sigma[pos2] = sigma[pos2], sigma[pos1]
        return [sigma[j * n:(j + 1) * n] for j in range(WIRE_COLUMNS)]

    def build(self):
        """Circuit 레코드를 만든다. 게이트 수는 2의 거듭제곱으로 올려 패딩한다."""
        if not self.gates:
            raise MalformedInputError("게이트가 없는 회로입니다")
        n = next_power_of_two(len(self.gates))
        selectors = [list(q) for q in zip(*(gate.selectors() for gate in self.gates))]
        selectors = [q + [0] * (n - len(q)) for q in selectors]
        return Circuit(selectors, self.build_permutation(n), circuit_length=len(self.gates))


def _same_cycle(sigma, start, target):
    position = sigma[start]
    while position != start:
        if position == target:
            return True
        position = sigma[position]
    return start == target


def pythagorean_triple():
    """예제 회로: 3² + 4² = 5² ("PLONK by hand").

    회로 구조:
      게이트 0 (mul): x · x = x²
      게이트 1 (mul): y · y = y²
      게이트 2 (mul): z · z = z²
      게이트 3 (add): x² + y² = z²

    배선 복사 제약:
      - 각 곱셈 게이트의 a == b (제곱)
      - 게이트0.c == 게이트3.a, 게이트1.c == 게이트3.b, 게이트2.c == 게이트3.c

    Returns:
        tuple: (circuit, [a, b, c])
    """
    builder = CircuitBuilder()
    for _ in range(3):
        builder.add_multiplication_gate()
    builder.add_addition_gate()

    builder.add_copy_constraint(0, 0, 0, 1)
    builder.add_copy_constraint(1, 0, 1, 1)
    builder.add_copy_constraint(2, 0, 2, 1)
    builder.add_copy_constraint(3, 0, 0, 2)
    builder.add_copy_constraint(3, 1, 1, 2)
    builder.add_copy_constraint(2, 2, 3, 2)

    witness = [
        [3, 4, 5, 9],
        [3, 4, 5, 16],
        [9, 16, 25, 25],
    ]
    return builder.build(), witness


def x3_plus_x_plus_5_eq_35(x=3):
    """예제 회로: x³ + x + 5 = 35.

    회로 구조:
      게이트 0 (mul): x · x = x²
      게이트 1 (mul): x² · x = x³
      게이트 2 (add): x³ + x
      게이트 3 (add+5): (x³ + x) + 5
      게이트 4 (assert): 결과 == 35

    게이트 5개이므로 n = 8로 패딩된다 (패딩 게이트의 셀렉터는 모두 0).

    Returns:
        tuple: (circuit, [a, b, c])
    """
    builder = CircuitBuilder()
    builder.add_multiplication_gate()
    builder.add_multiplication_gate()
    builder.add_addition_gate()
    builder.add_constant_gate(5)
    builder.add_assert_constant_gate(35)

    # x: 게이트0.a, 게이트0.b, 게이트1.b, 게이트2.b
    builder.add_copy_constraint(0, 0, 0, 1)
    builder.add_copy_constraint(0, 0, 1, 1)
    builder.add_copy_constraint(0, 0, 2, 1)
    # x²: 게이트0.c == 게이트1.a
    builder.add_copy_constraint(0, 2, 1, 0)
    # x³: 게이트1.c == 게이트2.a
    builder.add_copy_constraint(1, 2, 2, 0)
    # x³+x: 게이트2.c == 게이트3.a
    builder.add_copy_constraint(2, 2, 3, 0)
    # 결과: 게이트3.c == 게이트4.a
    builder.add_copy_constraint(3, 2, 4, 0)

    x2 = x * x
    x3 = x2 * x
    result = x3 + x + 5
    witness = [
        [x, x2, x3, x3 + x, result],
        [x, x, x, 0, 0],
        [x2, x3, x3 + x, result, 0],
    ]
    return builder.build(), witness
