"""
그룹 추상화와 Fiat-Shamir 트랜스크립트 테스트: group.py, transcript.py
"""
import hashlib

import pytest
from py_ecc import bn128

from ipaplonk.basis import Basis, seeded_randbytes
from ipaplonk.errors import MalformedInputError
from ipaplonk.group import CurveGroup, ModPGroup
from ipaplonk.transcript import Transcript, hash_transcript, transcript_to_bytes


P_SMALL = 337


# =====================================================================
# CurveGroup
# =====================================================================

class TestCurveGroup:
    @pytest.fixture
    def group(self):
        return CurveGroup()

    def test_identity_rules(self, group):
        G1 = bn128.G1
        assert group.scalar_mul(0, G1) is None
        assert group.scalar_mul(5, None) is None
        assert group.add(None, G1) == G1
        assert group.add() is None

    def test_scalar_mul(self, group):
        G1 = bn128.G1
        assert group.scalar_mul(1, G1) == G1
        assert group.scalar_mul(3, G1) == bn128.multiply(G1, 3)
        # 스칼라는 curve_order를 법으로 축소
        assert group.scalar_mul(bn128.curve_order + 2, G1) == bn128.multiply(G1, 2)
        assert group.scalar_mul(-1, G1) == bn128.neg(G1)

    def test_add_many(self, group):
        G1 = bn128.G1
        assert group.add(G1, G1, G1) == bn128.multiply(G1, 3)
        assert group.add(G1, bn128.neg(G1)) is None

    def test_inner_product_commit(self, group):
        G1 = bn128.G1
        G2 = bn128.multiply(G1, 7)
        assert group.inner_product_commit([2, 3], [G1, G2]) == bn128.multiply(G1, 23)
        assert group.inner_product_commit([], [G1]) is None
        # 원소가 스칼라보다 많으면 앞부분만 사용
        assert group.inner_product_commit([4], [G1, G2]) == bn128.multiply(G1, 4)

    def test_inner_product_commit_too_many_scalars(self, group):
        with pytest.raises(MalformedInputError):
            group.inner_product_commit([1, 2], [bn128.G1])

    def test_vector_ops(self, group):
        G1 = bn128.G1
        doubled = group.scalar_mul_vector(2, [G1, None])
        assert doubled == [bn128.double(G1), None]
        assert group.add_vectors([G1, G1], [G1, None]) == [bn128.double(G1), G1]

    def test_coordinates(self, group):
        x, y = group.coordinates(bn128.G1)
        assert (x, y) == (1, 2)
        assert group.coordinates(None) == [0, 0]

    def test_is_element(self, group):
        assert group.is_element(bn128.G1)
        assert group.is_element(None)
        assert not group.is_element((bn128.FQ(1), bn128.FQ(3)))
        assert not group.is_element((1, 2))
        assert not group.is_element(5)

    def test_to_point(self, group):
        assert group.to_point(1, 2) == bn128.G1
        with pytest.raises(MalformedInputError):
            group.to_point(1, 3)

    def test_random_element(self, group):
        randbytes = seeded_randbytes(b"points")
        points = [group.random_element(randbytes) for _ in range(4)]
        assert all(bn128.is_on_curve(point, bn128.b) for point in points)
        assert points[0] != points[1]

    def test_equality(self, group):
        assert group == CurveGroup()
        assert group != ModPGroup(P_SMALL)


# =====================================================================
# ModPGroup
# =====================================================================

class TestModPGroup:
    @pytest.fixture
    def group(self):
        return ModPGroup(P_SMALL)

    def test_attributes(self, group):
        assert group.identity == 1
        assert group.scalar_modulus == P_SMALL - 1
        assert group.byte_length == 2
        assert group.coordinate_count == 1

    def test_scalar_mul_is_exponentiation(self, group):
        assert group.scalar_mul(3, 5) == 125
        assert group.scalar_mul(0, 5) == 1
        # 지수는 p - 1 을 법으로 축소
        assert group.scalar_mul(P_SMALL - 1 + 2, 5) == 25

    def test_add_is_multiplication(self, group):
        assert group.add(5, 7) == 35
        assert group.add(100, 100, 100) == 1000000 % P_SMALL
        assert group.add() == 1

    def test_inner_product_commit(self, group):
        assert group.inner_product_commit([1, 2], [5, 7]) == 5 * 49 % P_SMALL

    def test_is_element(self, group):
        assert group.is_element(1)
        assert group.is_element(P_SMALL - 1)
        assert not group.is_element(0)
        assert not group.is_element(P_SMALL)
        assert not group.is_element(bn128.G1)

    def test_random_element(self, group):
        randbytes = seeded_randbytes(b"modp")
        assert all(1 < group.random_element(randbytes) < P_SMALL for _ in range(20))

    def test_equality(self, group):
        assert group == ModPGroup(P_SMALL)
        assert group != ModPGroup(7)


# =====================================================================
# Transcript
# =====================================================================

class TestTranscript:
    def test_serialization_width(self, curve_basis):
        elements = [bn128.G1, None, 7]
        data = transcript_to_bytes(elements, curve_basis)
        assert len(data) == (2 + 2 + 1) * 32
        assert data[:32] == (1).to_bytes(32, "little")
        assert data[64:128] == bytes(64)
        assert data[128:] == (7).to_bytes(32, "little")

    def test_hash_is_sha512_little_endian(self, curve_basis):
        elements = [bn128.G1, 3]
        digest = hashlib.sha512(transcript_to_bytes(elements, curve_basis)).digest()
        expected = int.from_bytes(digest, "little") % bn128.curve_order
        assert hash_transcript(elements, curve_basis) == expected

    def test_modp_reduces_by_p_minus_one(self, modp_basis):
        elements = [modp_basis.G[0], 3]
        digest = hashlib.sha512(transcript_to_bytes(elements, modp_basis)).digest()
        expected = int.from_bytes(digest, "little") % (modp_basis.p - 1)
        assert hash_transcript(elements, modp_basis) == expected

    def test_deterministic_and_order_sensitive(self, curve_basis):
        a, b = curve_basis.G[0], curve_basis.G[1]
        assert hash_transcript([a, b], curve_basis) == hash_transcript([a, b], curve_basis)
        assert hash_transcript([a, b], curve_basis) != hash_transcript([b, a], curve_basis)

    def test_challenge_does_not_mutate(self, curve_basis):
        t = Transcript(curve_basis, [curve_basis.G[0]])
        beta = t.challenge(0)
        gamma = t.challenge(1)
        assert beta != gamma
        assert len(t) == 1
        assert t.challenge(0) == beta

    def test_append_changes_challenge(self, curve_basis):
        t = Transcript(curve_basis)
        before = t.challenge()
        t.append(curve_basis.G[0], curve_basis.G[1])
        assert t.challenge() != before
        assert list(t) == [curve_basis.G[0], curve_basis.G[1]]

    def test_challenge_matches_hash(self, curve_basis):
        t = Transcript(curve_basis, curve_basis.G[:3])
        assert t.challenge(1) == hash_transcript(list(curve_basis.G[:3]) + [1], curve_basis)

    def test_basis_digest_used(self, curve_basis):
        b = curve_basis
        sha3 = Basis(
            b.p, b.G, b.W, b.cosets, b.cofactors, b.group,
            byte_length=b.byte_length, digest=hashlib.sha3_512,
        )
        elements = [b.G[0], 3]
        digest = hashlib.sha3_512(transcript_to_bytes(elements, sha3)).digest()
        expected = int.from_bytes(digest, "little") % bn128.curve_order
        assert hash_transcript(elements, sha3) == expected
        assert Transcript(sha3, elements).challenge() == expected
        assert expected != hash_transcript(elements, b)
        assert sha3 != b

    def test_explicit_digest_overrides_basis(self, curve_basis):
        elements = [curve_basis.G[0]]
        digest = hashlib.blake2b(transcript_to_bytes(elements, curve_basis)).digest()
        expected = int.from_bytes(digest, "little") % bn128.curve_order
        assert hash_transcript(elements, curve_basis, digest=hashlib.blake2b) == expected
