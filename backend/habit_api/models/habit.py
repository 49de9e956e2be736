"""
Habit Tracker Backend — Habit Domain Model
===========================================

What:  The stored representation of a habit plus its status/category enums.
Why:   The store keeps HabitRecord instances; API schemas are built from them
       so the wire contract can evolve independently of the stored shape.
Who:   Created by HabitService, held by HabitStore, projected by schemas.

Field values are the Portuguese strings the clients send and display
(e.g. "Ativo", "Bem-estar"); member names are English.

Status lifecycle:
    create ──▶ ATIVO ──archive──▶ ARQUIVADO
                 ▲                    │
                 └──────restore───────┘

    INATIVO is declared for clients that already know it but nothing
    produces it.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class HabitStatus(str, Enum):
    ACTIVE = "Ativo"
    ARCHIVED = "Arquivado"
    INACTIVE = "Inativo"


class HabitCategory(str, Enum):
    HEALTH = "Saúde"
    FITNESS = "Fitness"
    PRODUCTIVITY = "Produtividade"
    EDUCATION = "Educação"
    FINANCE = "Finanças"
    WELL_BEING = "Bem-estar"
    OTHER = "Outros"


# Fields HabitService may change after creation
MUTABLE_FIELDS = frozenset({"nome", "descricao", "categoria", "icone", "status"})


@dataclass
class HabitRecord:
    """
    One habit as held by the store.

    Immutable after creation: id, data_criacao, usuario_id, fuso_horario.
    data_criacao is an ISO-8601 UTC string, exactly as returned to clients.
    """

    id: str
    nome: str
    descricao: Optional[str]
    categoria: str
    icone: str
    data_criacao: str
    status: str
    usuario_id: str
    fuso_horario: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
