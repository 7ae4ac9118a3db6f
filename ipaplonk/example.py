"""
E2E 데모: IPA 커밋먼트와 PLONK (3² + 4² = 5²)
===============================================

이 스크립트는 전체 흐름을 시연한다.

실행:
    python -m ipaplonk.example

흐름:
    1. Basis 생성 (bn128 곡선, 16차 단위근)
    2. IPA: 다항식 커밋 → f(z) 평가 증명 → 검증
    3. 회로 구성 ("PLONK by hand")
    4. 증명 생성
    5. 증명 검증 + 조작된 증명 검증
"""

from ipaplonk.basis import Basis
from ipaplonk.circuit import pythagorean_triple
from ipaplonk.ipa import Opening, commit, prove_eval, validate_eval
from ipaplonk.prover import prove
from ipaplonk.serializers import int_to_base64
from ipaplonk.verifier import verify


def main():
    print("=" * 60)
    print("  IPA / PLONK Zero-Knowledge Proof Demo")
    print("  회로: 3² + 4² = 5²")
    print("=" * 60)

    # ── 1. Basis 생성 ──
    print("\n[1] Basis 생성...")
    basis = Basis.generate_curve(degree_bits=4, max_columns=3, seed=b"ipaplonk-demo")
    print(f"    최대 다항식 길이: {basis.max_degree}")
    print(f"    코셋 인자: {list(basis.cofactors)}")

    # ── 2. IPA ──
    print("\n[2] IPA 평가 증명...")
    f = [10, -5, 213, 0, 87691, 1]
    z = 11398476
    commitment = commit(f, basis)
    fz, proof = prove_eval(f, z, basis)
    print(f"    f(z) = {int_to_base64(fz, basis.byte_length)}")
    print(f"    증명 라운드 수: {len(proof.transcript) // 4}")
    print(f"    검증: {'성공 ✓' if validate_eval(commitment, z, fz, proof, basis) else '실패 ✗'}")
    wrong = validate_eval(commitment, z, fz + 1, proof, basis)
    print(f"    f(z) + 1 검증: {'성공 ✓' if wrong else '실패 ✗ (예상대로 실패)'}")

    # ── 3. 회로 구성 ──
    print("\n[3] 회로 구성...")
    circuit, witness = pythagorean_triple()
    print(f"    게이트 수: {circuit.circuit_length}")
    print(f"    순열: {circuit.permutation}")
    for i, gate in enumerate(circuit.gates()):
        a, b, c = (w[i] for w in witness)
        ok = gate.check(a, b, c, basis.p)
        print(f"      게이트 {i}: a={a}, b={b}, c={c} → {'✓' if ok else '✗'}")

    # ── 4. 증명 생성 ──
    print("\n[4] 증명 생성...")
    snark = prove(circuit, witness, basis)
    print(f"    커밋먼트 수: {len(snark.transcript)}")
    print(f"    a(ζ) = {int_to_base64(snark.witness_evals[0].fz, basis.byte_length)}")

    # ── 5. 검증 ──
    print("\n[5] 증명 검증...")
    result = verify(circuit, snark, basis)
    print(f"    검증 결과: {'성공 ✓' if result else '실패 ✗'}")

    print("\n[6] 조작된 증명으로 검증 (c(ζ) 변조)...")
    tampered = snark.witness_evals[2]
    snark.witness_evals[2] = Opening(tampered.fz + 1, tampered.proof)
    wrong_result = verify(circuit, snark, basis)
    print(f"    검증 결과: {'성공 ✓' if wrong_result else '실패 ✗ (예상대로 실패)'}")

    print("\n" + "=" * 60)
    if result and not wrong_result:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return result


if __name__ == "__main__":
    main()
