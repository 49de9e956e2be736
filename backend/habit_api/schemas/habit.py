"""
Habit Tracker Backend — Pydantic Request/Response Schemas
==========================================================

What:  Pydantic models defining the API contract between clients and backend,
       plus `validate_payload()`, the single entry point of the validation layer.
Why:   Every inbound payload is checked against its schema before any
       business rule runs; every outbound payload has a documented shape.
How:   Routes hand raw, untyped input to HabitService, which calls
       validate_payload(Model, raw). On failure a ValidationError carrying
       ALL field violations is raised; on success a typed model is returned.
Who:   Used by HabitService (validation), routes (response models) and
       OpenAPI doc generation.

Design Decision:
    Validation is deliberately not done by FastAPI's body parsing. The
    service receives raw input so that it can order its checks exactly
    (id first, then body) and so that the same rules apply to any caller,
    HTTP or not. Validation is pure: it never looks at the store.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from habit_api.exceptions import ValidationError
from habit_api.models.habit import HabitCategory, HabitRecord

# ── Limits ────────────────────────────────────────────────────────────────
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200
ARCHIVE_REASON_MAX_LENGTH = 200

# Canonical 8-4-4-4-12 hex shape, any version nibble
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

ModelT = TypeVar("ModelT", bound=BaseModel)
DataT = TypeVar("DataT")


# ══════════════════════════════════════════════════════════════════════════
# Request Models: What clients send
# ══════════════════════════════════════════════════════════════════════════


def utf16_length(value: str) -> int:
    """Length in UTF-16 code units, the unit browsers count in (an emoji is 2)."""
    return len(value.encode("utf-16-le")) // 2


def check_length(value: str, min_length: int = 0, max_length: Optional[int] = None) -> str:
    """
    Enforce text limits in UTF-16 code units.

    Raises the same error types pydantic's own min/max_length use, so the
    violation details look identical to other constraint failures.
    """
    length = utf16_length(value)
    if length < min_length:
        raise PydanticCustomError(
            "string_too_short",
            "String should have at least {min_length} characters",
            {"min_length": min_length},
        )
    if max_length is not None and length > max_length:
        raise PydanticCustomError(
            "string_too_long",
            "String should have at most {max_length} characters",
            {"max_length": max_length},
        )
    return value


class HabitUpdate(BaseModel):
    """
    What:  Payload for PUT /habit/{id}.
    Why:   Every editable field is required; the update replaces them all.
           fuso_horario is absent on purpose: the timezone is fixed at creation.

    Text limits count UTF-16 code units, not code points, so they agree
    with the frontend form's validation for emoji and other astral chars.
    """
    nome: str = Field(description="Display name, unique across all habits (3-50 chars)")
    descricao: Optional[str] = Field(
        description="Free text description, up to 200 chars (may be null, key is required)",
    )
    categoria: HabitCategory = Field(description="One of the fixed habit categories")
    icone: str = Field(min_length=1, description="Icon identifier chosen by the client")

    @field_validator("nome")
    @classmethod
    def validate_nome_length(cls, v: str) -> str:
        return check_length(v, NAME_MIN_LENGTH, NAME_MAX_LENGTH)

    @field_validator("descricao")
    @classmethod
    def validate_descricao_length(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_length(v, max_length=DESCRIPTION_MAX_LENGTH)


class HabitCreate(HabitUpdate):
    """Payload for POST /habit: the update fields plus the habit's timezone."""
    fuso_horario: str = Field(min_length=1, description="IANA timezone, e.g. America/Sao_Paulo")


class HabitArchive(BaseModel):
    """
    What:  Payload for POST /habit/{id}/archive.
    Note:  The reason is required and validated, but it is not stored.
    """
    motivo_arquivamento: str = Field(description="Why the habit is being archived (1-200 chars)")

    @field_validator("motivo_arquivamento")
    @classmethod
    def validate_reason_length(cls, v: str) -> str:
        return check_length(v, 1, ARCHIVE_REASON_MAX_LENGTH)


class HabitIdParams(BaseModel):
    """Path parameters for every /habit/{id} route."""
    id: str = Field(pattern=UUID_PATTERN, description="Habit id (UUID)")


# ══════════════════════════════════════════════════════════════════════════
# Validation Entry Point
# ══════════════════════════════════════════════════════════════════════════


def _violations(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic's error list into the public violation format."""
    violations = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        violations.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return violations


def validate_payload(
    model: Type[ModelT],
    raw: Any,
    message: str = "Validation failed",
) -> ModelT:
    """
    Validate an untyped value against `model`.

    Args:
        model:   Schema class to validate against
        raw:     Anything: dict from JSON, None for a missing body, a list...
        message: Top-level message used if validation fails

    Returns:
        The validated, typed model instance.

    Raises:
        ValidationError: With one detail entry per violated field.
    """
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(message=message, details=_violations(e)) from e


# ══════════════════════════════════════════════════════════════════════════
# Response Models: What the API returns
# ══════════════════════════════════════════════════════════════════════════


class HabitResponse(BaseModel):
    """
    What:  Full representation of a habit.
    Who:   Returned by POST /habit, GET /habit/{id} and PUT /habit/{id}.
    """
    id: str = Field(description="Unique habit identifier (UUID)")
    nome: str
    descricao: Optional[str] = None
    categoria: str
    icone: str
    status: str = Field(description="Ativo, Arquivado or Inativo")
    data_criacao: str = Field(description="Creation time (UTC ISO 8601)")
    usuario_id: str
    fuso_horario: str

    @classmethod
    def from_record(cls, record: HabitRecord) -> "HabitResponse":
        return cls(**record.to_dict())


class HabitListItem(BaseModel):
    """
    What:  Compact habit representation for the list view.
    Why:   Omits description, owner and timezone, which the list never shows.
    """
    id: str
    nome: str
    categoria: str
    icone: str
    status: str
    data_criacao: str

    @classmethod
    def from_record(cls, record: HabitRecord) -> "HabitListItem":
        return cls(
            id=record.id,
            nome=record.nome,
            categoria=record.categoria,
            icone=record.icone,
            status=record.status,
            data_criacao=record.data_criacao,
        )


class MessageResponse(BaseModel):
    """Confirmation returned by delete, archive and restore."""
    message: str


class SuccessResponse(BaseModel, Generic[DataT]):
    """
    What:  Envelope for every successful response.
    Example:
        {"success": true, "data": {"id": "...", "nome": "Meditar", ...}}
    """
    success: bool = True
    data: DataT


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models: Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorBody(BaseModel):
    code: str = Field(description="Machine-readable error kind, e.g. DUPLICATE_NAME")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(
        default=None,
        description="Field violations for VALIDATION_ERROR, absent otherwise",
    )


class ErrorResponse(BaseModel):
    """
    What:  Envelope for every failed response.
    Example:
        {
            "success": false,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Validation failed",
                "details": [{"field": "nome", "message": "...", "type": "string_too_short"}]
            },
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = False
    error: ErrorBody
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check payload: service status, version and store counters."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    habits_total: int = Field(description="Habits currently stored")
    habits_active: int = Field(description="Habits with status Ativo")
    max_active_habits: int = Field(description="Configured active-habit cap")
    uptime_seconds: float = Field(description="Seconds since the application was created")
