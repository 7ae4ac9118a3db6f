"""
공용 fixture: 결정론적 Basis와 예제 회로 증명
"""
import pytest

from ipaplonk.basis import Basis
from ipaplonk.circuit import pythagorean_triple
from ipaplonk.prover import prove


# ── 테스트 상수 ──
CURVE_SEED = b"ipaplonk-tests-curve"
MODP_SEED = b"ipaplonk-tests-modp"

IPA_POLY = [10, -5, 213, 0, 87691, 1]
IPA_POINT = 11398476


# ─────────────────────────────────────────────────────────────────────
# Basis
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def curve_basis():
    """bn128 G1 위의 16차 Basis (코셋 10개)."""
    return Basis.generate_curve(4, seed=CURVE_SEED)


@pytest.fixture(scope="session")
def modp_basis():
    """Pallas 소수 위의 16차 mod-p Basis."""
    return Basis.generate_modp(4, seed=MODP_SEED)


# ─────────────────────────────────────────────────────────────────────
# PLONK 예제: 3² + 4² = 5²
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def pythagorean():
    """(circuit, witness)"""
    return pythagorean_triple()


@pytest.fixture(scope="session")
def pythagorean_snark(pythagorean, curve_basis):
    circuit, witness = pythagorean
    return prove(circuit, witness, curve_basis)
