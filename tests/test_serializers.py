"""
직렬화와 TinyDB 저장소 테스트: serializers.py, store.py
"""
import base64
import hashlib
import json

import pytest
from tinydb.storages import MemoryStorage

from ipaplonk.basis import Basis
from ipaplonk.errors import MalformedInputError
from ipaplonk.group import CurveGroup
from ipaplonk.ipa import commit, prove_eval, validate_eval
from ipaplonk.serializers import (
    basis_from_dict,
    basis_to_dict,
    circuit_from_dict,
    circuit_to_dict,
    deserialize_digest,
    deserialize_element,
    deserialize_group,
    evaluation_proof_from_dict,
    evaluation_proof_to_dict,
    int_from_base64,
    int_to_base64,
    opening_from_dict,
    opening_to_dict,
    serialize_element,
    snark_from_dict,
    snark_to_dict,
)
from ipaplonk.store import BasisStore
from ipaplonk.verifier import verify


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    store = BasisStore(storage=MemoryStorage)
    yield store
    store.close()


def _json_roundtrip(data):
    return json.loads(json.dumps(data))


# =====================================================================
# 정수와 그룹 원소
# =====================================================================

class TestPrimitives:
    def test_base64_fixed_width(self):
        text = int_to_base64(1, 32)
        assert len(base64.b64decode(text)) == 32
        assert base64.b64decode(text)[0] == 1
        assert int_from_base64(text) == 1

    def test_base64_large(self, curve_basis):
        value = curve_basis.p - 1
        assert int_from_base64(int_to_base64(value, curve_basis.byte_length)) == value

    def test_curve_element(self, curve_basis):
        group = curve_basis.group
        point = curve_basis.G[3]
        data = serialize_element(point, group)
        assert all(isinstance(c, str) for c in data)
        assert deserialize_element(_json_roundtrip(data), group) == point

    def test_curve_infinity(self):
        group = CurveGroup()
        assert serialize_element(None, group) is None
        assert deserialize_element(None, group) is None

    def test_curve_point_not_on_curve(self):
        with pytest.raises(MalformedInputError):
            deserialize_element(["1", "3"], CurveGroup())

    def test_modp_element(self, modp_basis):
        group = modp_basis.group
        element = modp_basis.G[0]
        assert deserialize_element(serialize_element(element, group), group) == element

    def test_unknown_group(self):
        with pytest.raises(MalformedInputError):
            deserialize_group({"kind": "pairing"}, 7)


# =====================================================================
# Basis / 증명 / 회로
# =====================================================================

class TestRecords:
    def test_curve_basis(self, curve_basis):
        data = _json_roundtrip(basis_to_dict(curve_basis))
        assert basis_from_dict(data) == curve_basis

    def test_modp_basis(self, modp_basis):
        data = _json_roundtrip(basis_to_dict(modp_basis))
        restored = basis_from_dict(data)
        assert restored == modp_basis
        assert restored.group.scalar_modulus == modp_basis.p - 1

    def test_basis_digest(self):
        basis = Basis.generate_curve(2, max_columns=3, seed=b"digest", digest=hashlib.sha3_512)
        data = _json_roundtrip(basis_to_dict(basis))
        assert data["digest"] == "sha3_512"
        restored = basis_from_dict(data)
        assert restored.digest is hashlib.sha3_512
        assert restored == basis

    def test_basis_without_digest_defaults(self, curve_basis):
        data = _json_roundtrip(basis_to_dict(curve_basis))
        del data["digest"]
        assert basis_from_dict(data) == curve_basis

    def test_unknown_digest(self):
        with pytest.raises(MalformedInputError):
            deserialize_digest("md4-custom")

    def test_evaluation_proof(self, curve_basis):
        f = [10, -5, 213, 0, 87691, 1]
        fz, proof = prove_eval(f, 11398476, curve_basis)
        data = _json_roundtrip(evaluation_proof_to_dict(proof, curve_basis.group))
        restored = evaluation_proof_from_dict(data, curve_basis.group)
        assert restored == proof
        assert validate_eval(commit(f, curve_basis), 11398476, fz, restored, curve_basis)

    def test_opening(self, pythagorean_snark, curve_basis):
        opening = pythagorean_snark.z_eval
        data = _json_roundtrip(opening_to_dict(opening, curve_basis.group))
        assert opening_from_dict(data, curve_basis.group) == opening

    def test_snark(self, pythagorean, pythagorean_snark, curve_basis):
        circuit, _ = pythagorean
        data = _json_roundtrip(snark_to_dict(pythagorean_snark, curve_basis.group))
        restored = snark_from_dict(data, curve_basis.group)
        assert restored == pythagorean_snark
        assert verify(circuit, restored, curve_basis)

    def test_circuit(self, pythagorean):
        circuit, _ = pythagorean
        data = _json_roundtrip(circuit_to_dict(circuit))
        # 음수 셀렉터 리터럴 보존
        assert data["selectors"][2] == ["-1", "-1", "-1", "-1"]
        assert circuit_from_dict(data) == circuit


# =====================================================================
# BasisStore (TinyDB)
# =====================================================================

class TestBasisStore:
    def test_save_and_load_basis(self, store, curve_basis):
        store.save_basis("curve16", curve_basis)
        assert store.load_basis("curve16") == curve_basis
        assert store.names() == ["curve16"]

    def test_overwrite(self, store, curve_basis, modp_basis):
        store.save_basis("default", curve_basis)
        store.save_basis("default", modp_basis)
        assert store.names() == ["default"]
        assert store.load_basis("default") == modp_basis

    def test_missing(self, store):
        assert store.load_basis("nothing") is None
        assert store.load_snark("nothing") is None

    def test_snark_roundtrip(self, store, curve_basis, pythagorean, pythagorean_snark):
        circuit, _ = pythagorean
        store.save_basis("curve16", curve_basis)
        store.save_snark("pythagorean", pythagorean_snark, "curve16", circuit)
        loaded_circuit, loaded_snark, loaded_basis = store.load_snark("pythagorean")
        assert loaded_circuit == circuit
        assert loaded_snark == pythagorean_snark
        assert verify(loaded_circuit, loaded_snark, loaded_basis)

    def test_snark_requires_basis(self, store, pythagorean, pythagorean_snark):
        circuit, _ = pythagorean
        with pytest.raises(KeyError):
            store.save_snark("pythagorean", pythagorean_snark, "unknown", circuit)

    def test_remove(self, store, curve_basis, modp_basis):
        store.save_basis("a", curve_basis)
        store.save_basis("b", modp_basis)
        store.remove("a")
        assert store.names() == ["b"]
        assert store.load_basis("a") is None

    def test_file_storage(self, tmp_path, modp_basis):
        path = str(tmp_path / "db.json")
        first = BasisStore(path)
        first.save_basis("modp", modp_basis)
        first.close()
        second = BasisStore(path)
        assert second.load_basis("modp") == modp_basis
        second.close()
