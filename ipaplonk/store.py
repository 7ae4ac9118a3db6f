"""
TinyDB 저장소
==============

생성한 Basis와 증명(Snark)을 이름으로 저장하고 불러온다.

  - 파일 저장소: BasisStore("db.json")
  - 메모리 저장소: BasisStore(storage=MemoryStorage) (테스트용)

테이블:
  | 테이블  | 문서                                        |
  |---------|---------------------------------------------|
  | bases   | {"name", "value": basis_to_dict(...)}       |
  | snarks  | {"name", "basis", "circuit", "value"}       |
"""

import logging

from tinydb import Query, TinyDB

from ipaplonk.serializers import (
    basis_from_dict,
    basis_to_dict,
    circuit_from_dict,
    circuit_to_dict,
    snark_from_dict,
    snark_to_dict,
)


logger = logging.getLogger(__name__)

Entry = Query()


class BasisStore:
    """이름 → Basis / Snark 문서 저장소."""

    def __init__(self, path="db.json", storage=None):
        if storage is not None:
            self.db = TinyDB(storage=storage)
        else:
            self.db = TinyDB(path)
        self.bases = self.db.table("bases")
        self.snarks = self.db.table("snarks")

    # ─── Basis ───

    def save_basis(self, name, basis):
        """같은 이름의 Basis가 있으면 덮어쓴다."""
        self.bases.remove(Entry.name == name)
        self.bases.insert({"name": name, "value": basis_to_dict(basis)})
        logger.debug("Basis 저장: %s", name)

    def load_basis(self, name):
        """저장된 Basis를 불러온다. 없으면 None."""
        rows = self.bases.search(Entry.name == name)
        if not rows:
            return None
        return basis_from_dict(rows[0]["value"])

    def names(self):
        return sorted(row["name"] for row in self.bases.all())

    # ─── Snark ───

    def save_snark(self, name, snark, basis_name, circuit):
        """증명과 그 증명을 검증할 회로, Basis 이름을 함께 저장한다.

        Raises:
            KeyError: basis_name으로 저장된 Basis가 없을 때
        """
        basis = self.load_basis(basis_name)
        if basis is None:
            raise KeyError(basis_name)
        self.snarks.remove(Entry.name == name)
        self.snarks.insert({
            "name": name,
            "basis": basis_name,
            "circuit": circuit_to_dict(circuit),
            "value": snark_to_dict(snark, basis.group),
        })
        logger.debug("Snark 저장: %s (basis=%s)", name, basis_name)

    def load_snark(self, name):
        """저장된 증명을 불러온다.

        Returns:
            tuple: (circuit, snark, basis) 또는 없으면 None
        """
        rows = self.snarks.search(Entry.name == name)
        if not rows:
            return None
        row = rows[0]
        basis = self.load_basis(row["basis"])
        if basis is None:
            raise KeyError(row["basis"])
        circuit = circuit_from_dict(row["circuit"])
        return circuit, snark_from_dict(row["value"], basis.group), basis

    def remove(self, name):
        """이름이 같은 Basis와 Snark를 모두 지운다."""
        self.bases.remove(Entry.name == name)
        self.snarks.remove(Entry.name == name)

    def close(self):
        self.db.close()
