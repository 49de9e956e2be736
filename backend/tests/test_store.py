"""
Habit Tracker Backend — Habit Store Unit Tests
===============================================

What:  Tests for HabitStore queries, mutations and copy semantics.
Why:   The store holds the only copy of every habit; leaking a mutable
       reference or reusing an id would break the service's guarantees.

What we test:
    ✅ Insert, lookup, merge, delete round trips
    ✅ Predicates used by the service (exists_by_name, count_active)
    ✅ Callers only ever receive copies
    ✅ Ids are never reused, even after deletion
    ✅ Immutable fields cannot be merged
"""

import uuid

import pytest

from habit_api.models.habit import HabitRecord, HabitStatus
from habit_api.store import HabitStore


def make_record(nome="Meditar", status=HabitStatus.ACTIVE.value, **overrides):
    fields = {
        "id": str(uuid.uuid4()),
        "nome": nome,
        "descricao": None,
        "categoria": "Bem-estar",
        "icone": "sparkles",
        "data_criacao": "2026-01-15T12:00:00.000Z",
        "status": status,
        "usuario_id": "00000000-0000-0000-0000-000000000000",
        "fuso_horario": "America/Sao_Paulo",
    }
    fields.update(overrides)
    return HabitRecord(**fields)


class TestHabitStoreQueries:
    """Tests for read-only operations."""

    def setup_method(self):
        self.store = HabitStore()

    def test_empty_store(self):
        """A new store has no records."""
        assert self.store.get_all() == []
        assert self.store.count() == 0
        assert self.store.count_active() == 0

    def test_get_all_keeps_insertion_order(self):
        """get_all returns records in the order they were added."""
        names = ["Ler", "Correr", "Beber água"]
        for name in names:
            self.store.add(make_record(nome=name))
        assert [r.nome for r in self.store.get_all()] == names

    def test_get_by_id_miss_returns_none(self):
        """Unknown ids are not an error at this level."""
        assert self.store.get_by_id(str(uuid.uuid4())) is None

    def test_exists_by_name_is_case_sensitive(self):
        """Only an exact match counts as a duplicate."""
        self.store.add(make_record(nome="Meditar"))
        assert self.store.exists_by_name("Meditar") is True
        assert self.store.exists_by_name("meditar") is False
        assert self.store.exists_by_name("Meditar ") is False

    def test_exists_by_name_includes_archived(self):
        """Archived habits still hold their name."""
        self.store.add(make_record(nome="Ler", status=HabitStatus.ARCHIVED.value))
        assert self.store.exists_by_name("Ler") is True

    def test_count_active_ignores_other_statuses(self):
        """Only Ativo records count toward the active total."""
        self.store.add(make_record(nome="A1"))
        self.store.add(make_record(nome="A2"))
        self.store.add(make_record(nome="Ar", status=HabitStatus.ARCHIVED.value))
        self.store.add(make_record(nome="In", status=HabitStatus.INACTIVE.value))
        assert self.store.count_active() == 2
        assert self.store.count() == 4


class TestHabitStoreMutations:
    """Tests for add, update, delete and clear."""

    def setup_method(self):
        self.store = HabitStore()

    def test_update_merges_fields(self):
        """update changes only the given fields."""
        record = self.store.add(make_record(nome="Ler", descricao="10 páginas"))
        updated = self.store.update(record.id, nome="Ler mais")

        assert updated.nome == "Ler mais"
        assert updated.descricao == "10 páginas"
        assert self.store.get_by_id(record.id).nome == "Ler mais"

    def test_update_unknown_id_returns_none(self):
        assert self.store.update(str(uuid.uuid4()), nome="Nada") is None

    def test_update_can_set_description_to_null(self):
        """descricao is nullable and may be cleared."""
        record = self.store.add(make_record(descricao="algo"))
        assert self.store.update(record.id, descricao=None).descricao is None

    def test_update_rejects_immutable_fields(self):
        """id, creation time, owner and timezone are fixed after creation."""
        record = self.store.add(make_record())
        for field in ("id", "data_criacao", "usuario_id", "fuso_horario"):
            with pytest.raises(ValueError, match="cannot be changed"):
                self.store.update(record.id, **{field: "x"})

    def test_update_rejects_unknown_fields(self):
        record = self.store.add(make_record())
        with pytest.raises(ValueError, match="Unknown"):
            self.store.update(record.id, motivo_arquivamento="x")

    def test_delete_reports_existence(self):
        """delete returns True once, then False."""
        record = self.store.add(make_record())
        assert self.store.delete(record.id) is True
        assert self.store.delete(record.id) is False
        assert self.store.exists(record.id) is False

    def test_id_is_never_reused(self):
        """A deleted id cannot be inserted again."""
        record = self.store.add(make_record())
        self.store.delete(record.id)
        with pytest.raises(ValueError, match="already been used"):
            self.store.add(make_record(id=record.id, nome="Outro"))

    def test_clear_keeps_ids_reserved(self):
        record = self.store.add(make_record())
        self.store.clear()
        assert self.store.count() == 0
        with pytest.raises(ValueError):
            self.store.add(make_record(id=record.id))


class TestHabitStoreCopies:
    """Callers must never hold a reference to the stored record."""

    def setup_method(self):
        self.store = HabitStore()

    def test_add_stores_a_copy(self):
        """Mutating the inserted object does not affect the store."""
        record = make_record(nome="Original")
        self.store.add(record)
        record.nome = "Mudado"
        assert self.store.get_by_id(record.id).nome == "Original"

    def test_reads_return_copies(self):
        """Mutating a read result does not affect the store."""
        record = self.store.add(make_record(nome="Original"))
        self.store.get_by_id(record.id).nome = "Mudado"
        self.store.get_all()[0].status = HabitStatus.ARCHIVED.value
        stored = self.store.get_by_id(record.id)
        assert stored.nome == "Original"
        assert stored.status == HabitStatus.ACTIVE.value

    def test_transaction_is_reentrant(self):
        """Store methods can be called while holding the transaction lock."""
        with self.store.transaction() as store:
            store.add(make_record())
            assert store.count() == 1
