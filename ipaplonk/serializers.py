"""
데이터 직렬화/역직렬화 헬퍼
============================

TinyDB(JSON)에 저장 가능한 형태로 Basis, 증명, 회로를 변환한다.

**정수 표현**:
  - 기본: 10진수 문자열 (JSON 정수 정밀도 한계 회피)
  - 압축: 고정 폭 리틀엔디안 바이트열의 base64 (int_to_base64)

**그룹 원소 표현**:
  - mod-p 그룹: 10진수 문자열
  - 곡선 그룹: [x, y] 10진수 문자열 쌍, 무한원점은 None
"""

import base64
import hashlib

from ipaplonk.basis import Basis
from ipaplonk.circuit import Circuit
from ipaplonk.errors import MalformedInputError
from ipaplonk.group import CurveGroup, ModPGroup
from ipaplonk.ipa import EvaluationProof, Opening
from ipaplonk.prover import Snark


# ─── 정수 ───

def int_to_base64(value, byte_length):
    """int → base64(byte_length 바이트 리틀엔디안)"""
    return base64.b64encode(value.to_bytes(byte_length, "little")).decode("ascii")


def int_from_base64(text):
    """base64 → int"""
    return int.from_bytes(base64.b64decode(text), "little")


def serialize_int(value):
    return str(int(value))


def deserialize_int(text):
    return int(text)


# ─── 그룹 원소 ───

def serialize_element(element, group):
    """그룹 원소 → str (mod-p) / [str, str] 또는 None (곡선)"""
    if isinstance(group, CurveGroup):
        if element is None:
            return None
        return [serialize_int(c) for c in group.coordinates(element)]
    return serialize_int(element)


def deserialize_element(data, group):
    """serialize_element의 역변환.

    Raises:
        MalformedInputError: 곡선 위의 점이 아닐 때
    """
    if isinstance(group, CurveGroup):
        if data is None:
            return None
        x, y = data
        return group.to_point(int(x), int(y))
    return deserialize_int(data)


def serialize_group(group):
    return {"kind": group.name}


def deserialize_group(data, p):
    kind = data["kind"]
    if kind == CurveGroup.name:
        return CurveGroup()
    if kind == ModPGroup.name:
        return ModPGroup(p)
    raise MalformedInputError(f"알 수 없는 그룹 종류: {kind}")


# ─── Basis ───

def basis_to_dict(basis):
    """Basis → dict"""
    group = basis.group
    return {
        "group": serialize_group(group),
        "p": serialize_int(basis.p),
        "byte_length": basis.byte_length,
        "degree_bits": basis.degree_bits,
        "G": [serialize_element(g, group) for g in basis.G],
        "W": [serialize_int(w) for w in basis.W],
        "cosets": [[serialize_int(w) for w in coset] for coset in basis.cosets],
        "cofactors": [serialize_int(k) for k in basis.cofactors],
        "digest": basis.digest().name,
    }


def basis_from_dict(data):
    """dict → Basis"""
    p = deserialize_int(data["p"])
    group = deserialize_group(data["group"], p)
    return Basis(
        p,
        [deserialize_element(g, group) for g in data["G"]],
        [deserialize_int(w) for w in data["W"]],
        [[deserialize_int(w) for w in coset] for coset in data["cosets"]],
        [deserialize_int(k) for k in data["cofactors"]],
        group,
        byte_length=data["byte_length"],
        digest=deserialize_digest(data.get("digest", "sha512")),
    )


def deserialize_digest(name):
    """hashlib 알고리즘 이름 → 해시 생성자"""
    if name not in hashlib.algorithms_guaranteed:
        raise MalformedInputError(f"알 수 없는 해시: {name}")
    return getattr(hashlib, name)


# ─── EvaluationProof / Opening ───

def evaluation_proof_to_dict(proof, group):
    """EvaluationProof → dict. 교차항은 라운드마다 [그룹, 그룹, 스칼라, 스칼라]."""
    transcript = []
    for i, element in enumerate(proof.transcript):
        if i % 4 < 2:
            transcript.append(serialize_element(element, group))
        else:
            transcript.append(serialize_int(element))
    return {
        "a": serialize_int(proof.a),
        "length": proof.length,
        "transcript": transcript,
    }


def evaluation_proof_from_dict(data, group):
    """dict → EvaluationProof"""
    transcript = []
    for i, element in enumerate(data["transcript"]):
        if i % 4 < 2:
            transcript.append(deserialize_element(element, group))
        else:
            transcript.append(deserialize_int(element))
    return EvaluationProof(deserialize_int(data["a"]), transcript, data["length"])


def opening_to_dict(opening, group):
    return {
        "fz": serialize_int(opening.fz),
        "proof": evaluation_proof_to_dict(opening.proof, group),
    }


def opening_from_dict(data, group):
    return Opening(
        deserialize_int(data["fz"]),
        evaluation_proof_from_dict(data["proof"], group),
    )


# ─── Snark ───

def snark_to_dict(snark, group):
    """Snark → dict"""
    return {
        "transcript": [serialize_element(c, group) for c in snark.transcript],
        "witness_evals": [opening_to_dict(o, group) for o in snark.witness_evals],
        "z_eval": opening_to_dict(snark.z_eval, group),
        "z_shifted_eval": opening_to_dict(snark.z_shifted_eval, group),
        "quotient_evals": [opening_to_dict(o, group) for o in snark.quotient_evals],
    }


def snark_from_dict(data, group):
    """dict → Snark"""
    return Snark(
        [deserialize_element(c, group) for c in data["transcript"]],
        [opening_from_dict(o, group) for o in data["witness_evals"]],
        opening_from_dict(data["z_eval"], group),
        opening_from_dict(data["z_shifted_eval"], group),
        [opening_from_dict(o, group) for o in data["quotient_evals"]],
    )


# ─── Circuit ───

def circuit_to_dict(circuit):
    """Circuit → dict (셀렉터는 음수 리터럴을 그대로 보존)"""
    return {
        "selectors": [[serialize_int(v) for v in q] for q in circuit.selectors],
        "permutation": [list(row) for row in circuit.permutation],
        "circuit_length": circuit.circuit_length,
    }


def circuit_from_dict(data):
    """dict → Circuit"""
    return Circuit(
        [[deserialize_int(v) for v in q] for q in data["selectors"]],
        data["permutation"],
        circuit_length=data["circuit_length"],
    )
