"""
Habit Tracker Backend — HabitClient Tests
==========================================

What:  Tests for the cached HTTP client against an in-process app.
Why:   The client's cache must never show stale data after its own
       mutations, and failure envelopes must surface as HabitApiError.
How:   HabitClient wraps FastAPI's TestClient (an httpx.Client subclass).

What we test:
    ✅ Full lifecycle through the client
    ✅ Reads are cached; mutations invalidate
    ✅ Error codes, status and details are preserved
    ✅ Client-side name search
"""

import uuid

import pytest

from habit_api.client import HabitApiError, HabitClient


@pytest.fixture
def client(sync_client):
    return HabitClient(http_client=sync_client)


class TestHabitClientOperations:

    def test_lifecycle(self, client, habit_payload):
        habit = client.create_habit(habit_payload())
        assert habit["status"] == "Ativo"

        assert client.archive_habit(habit["id"], "Não uso mais") == "Hábito arquivado com sucesso"
        assert client.get_habit(habit["id"])["status"] == "Arquivado"

        assert client.restore_habit(habit["id"]) == "Hábito restaurado com sucesso"
        assert client.list_habits()[0]["status"] == "Ativo"

        updated = client.update_habit(habit["id"], {
            "nome": "Meditar 20min",
            "descricao": "Manhã",
            "categoria": "Saúde",
            "icone": "sun",
        })
        assert updated["nome"] == "Meditar 20min"

        assert client.delete_habit(habit["id"]) == "Hábito excluído com sucesso"
        assert client.list_habits() == []

    def test_requires_base_url_or_client(self):
        with pytest.raises(ValueError):
            HabitClient()


class TestHabitClientCache:

    def test_list_is_cached_until_invalidated(self, client, sync_client, habit_payload):
        """Changes made behind the client's back stay invisible until a refresh."""
        assert client.list_habits() == []

        sync_client.post("/habit", json=habit_payload())
        assert client.list_habits() == []
        assert len(client.list_habits(refresh=True)) == 1

        sync_client.post("/habit", json=habit_payload(nome="Correr"))
        client.invalidate()
        assert len(client.list_habits()) == 2

    def test_own_mutations_invalidate(self, client, habit_payload):
        habit = client.create_habit(habit_payload())
        assert client.get_habit(habit["id"])["status"] == "Ativo"
        assert len(client.list_habits()) == 1

        client.archive_habit(habit["id"], "pausa")
        assert client.get_habit(habit["id"])["status"] == "Arquivado"
        assert client.list_habits()[0]["status"] == "Arquivado"

    def test_cached_results_are_copies(self, client, habit_payload):
        habit = client.create_habit(habit_payload())
        client.get_habit(habit["id"])["nome"] = "mexido"
        client.list_habits().clear()
        client.list_habits()[0]["nome"] = "mexido"
        assert client.get_habit(habit["id"])["nome"] == "Meditar"
        assert len(client.list_habits()) == 1
        assert client.list_habits()[0]["nome"] == "Meditar"
        assert client.search_habits("meditar")[0]["nome"] == "Meditar"

    def test_failed_mutation_keeps_cache(self, client, sync_client, habit_payload):
        client.create_habit(habit_payload())
        assert len(client.list_habits()) == 1
        sync_client.post("/habit", json=habit_payload(nome="Escondido"))

        with pytest.raises(HabitApiError):
            client.create_habit(habit_payload())
        # Still the cached single-item list
        assert len(client.list_habits()) == 1


class TestHabitClientErrors:

    def test_not_found(self, client):
        with pytest.raises(HabitApiError) as exc_info:
            client.get_habit(str(uuid.uuid4()))
        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.status_code == 404

    def test_validation_details(self, client, habit_payload):
        with pytest.raises(HabitApiError) as exc_info:
            client.create_habit(habit_payload(nome="ab"))
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details[0]["field"] == "nome"

    def test_business_rule_codes(self, client, habit_payload):
        habit = client.create_habit(habit_payload())
        with pytest.raises(HabitApiError) as exc_info:
            client.restore_habit(habit["id"])
        assert exc_info.value.code == "ALREADY_ACTIVE"
        assert str(exc_info.value) == "ALREADY_ACTIVE: Este hábito já está ativo"


class TestHabitClientSearch:

    def test_search_is_case_insensitive_substring(self, client, habit_payload):
        for nome in ("Meditar", "Ler livro", "Correr 5km"):
            client.create_habit(habit_payload(nome=nome))

        assert [h["nome"] for h in client.search_habits("LER")] == ["Ler livro"]
        assert [h["nome"] for h in client.search_habits("r")] == ["Meditar", "Ler livro", "Correr 5km"]
        assert client.search_habits("nada") == []
