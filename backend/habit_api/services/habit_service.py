"""
Habit Tracker Backend — Habit Service (Business Logic Orchestrator)
====================================================================

What:  Every habit operation: list, create, get, update, delete, archive, restore.
Why:   Encapsulates all business rules in one place, independent of HTTP.
How:   Each operation validates its raw input, checks its rules and performs
       at most one store write, all while holding the store transaction.
Who:   Called by route handlers (via get_habit_service) and by tests.

Rule Evaluation Order (create):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Schema  │───▶│ Active limit │───▶│ Unique name  │───▶│  Insert  │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘
    VALIDATION_ERROR  LIMIT_REACHED      DUPLICATE_NAME

    The order is fixed: a payload that is invalid AND over the limit always
    reports VALIDATION_ERROR.

Design Decision:
    The service is constructed with its store instead of importing a global
    one. The application factory creates exactly one store and one service
    and keeps them on app.state; tests build their own pair.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List

from fastapi import Request

from habit_api.config import DEFAULT_USER_ID
from habit_api.exceptions import (
    AlreadyActiveError,
    AlreadyArchivedError,
    DuplicateNameError,
    LimitReachedError,
    NotFoundError,
)
from habit_api.models.habit import HabitRecord, HabitStatus
from habit_api.schemas.habit import (
    HabitArchive,
    HabitCreate,
    HabitIdParams,
    HabitListItem,
    HabitResponse,
    HabitUpdate,
    MessageResponse,
    validate_payload,
)
from habit_api.store import HabitStore

logger = logging.getLogger(__name__)


def _utcnow_iso() -> str:
    """Creation timestamp in the same shape JavaScript's toISOString() emits."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class HabitService:
    """
    Business logic layer for habits; the only writer to the store.

    Responsibilities:
        - list_habits():   Summary projection of every habit
        - create_habit():  Schema → limit → duplicate name → insert
        - get_habit():     Id shape → lookup
        - update_habit():  Id shape → body → lookup → rename check → merge
        - delete_habit():  Id shape → lookup → permanent removal
        - archive_habit(): Id shape → reason → lookup → status guard
        - restore_habit(): Id shape → lookup → status guard

    Error Handling Strategy:
        Every rule violation raises the HabitError subclass for its kind.
        All checks run before the single write, so a failed request never
        leaves a partially updated record behind.
    """

    def __init__(
        self,
        store: HabitStore,
        max_active_habits: int = 20,
        default_user_id: str = DEFAULT_USER_ID,
    ):
        self.store = store
        self.max_active_habits = max_active_habits
        self.default_user_id = default_user_id

    # ── Helpers ───────────────────────────────────────────────────────────

    def _parse_id(self, raw_params: Any) -> str:
        params = validate_payload(HabitIdParams, raw_params, message="Invalid ID")
        return params.id

    def _require(self, habit_id: str) -> HabitRecord:
        record = self.store.get_by_id(habit_id)
        if record is None:
            raise NotFoundError()
        return record

    # ── Operations ────────────────────────────────────────────────────────

    def list_habits(self) -> List[HabitListItem]:
        """All habits as summaries, in insertion order. No filtering."""
        return [HabitListItem.from_record(record) for record in self.store.get_all()]

    def create_habit(self, raw_body: Any) -> HabitResponse:
        """
        Create a habit from an untyped request body.

        Raises:
            ValidationError:    Body does not match HabitCreate
            LimitReachedError:  max_active_habits habits are already Active
            DuplicateNameError: Any habit, whatever its status, has this name
        """
        data = validate_payload(HabitCreate, raw_body)

        with self.store.transaction():
            active = self.store.count_active()
            if active >= self.max_active_habits:
                logger.info("Create rejected: %d active habits (limit %d)", active, self.max_active_habits)
                raise LimitReachedError(limit=self.max_active_habits)

            if self.store.exists_by_name(data.nome):
                logger.info("Create rejected: duplicate name %r", data.nome)
                raise DuplicateNameError()

            record = self.store.add(HabitRecord(
                id=str(uuid.uuid4()),
                nome=data.nome,
                descricao=data.descricao,
                categoria=data.categoria.value,
                icone=data.icone,
                data_criacao=_utcnow_iso(),
                status=HabitStatus.ACTIVE.value,
                usuario_id=self.default_user_id,
                fuso_horario=data.fuso_horario,
            ))

        logger.info("Habit %s created (%s)", record.id, record.categoria)
        return HabitResponse.from_record(record)

    def get_habit(self, raw_params: Any) -> HabitResponse:
        habit_id = self._parse_id(raw_params)
        return HabitResponse.from_record(self._require(habit_id))

    def update_habit(self, raw_params: Any, raw_body: Any) -> HabitResponse:
        """
        Replace a habit's editable fields (nome, descricao, categoria, icone).

        The id is validated before the body, so a bad id is reported on its
        own even when the body is also invalid. Keeping the current name is
        always allowed; a new name must not be held by any habit.

        Raises:
            ValidationError, NotFoundError, DuplicateNameError
        """
        habit_id = self._parse_id(raw_params)
        data = validate_payload(HabitUpdate, raw_body)

        with self.store.transaction():
            existing = self._require(habit_id)

            if data.nome != existing.nome and self.store.exists_by_name(data.nome):
                logger.info("Update of %s rejected: duplicate name %r", habit_id, data.nome)
                raise DuplicateNameError()

            updated = self.store.update(
                habit_id,
                nome=data.nome,
                descricao=data.descricao,
                categoria=data.categoria.value,
                icone=data.icone,
            )

        logger.info("Habit %s updated", habit_id)
        return HabitResponse.from_record(updated)

    def delete_habit(self, raw_params: Any) -> MessageResponse:
        """Permanently remove a habit. There is no soft delete."""
        habit_id = self._parse_id(raw_params)

        with self.store.transaction():
            if not self.store.exists(habit_id):
                raise NotFoundError()
            self.store.delete(habit_id)

        logger.info("Habit %s deleted", habit_id)
        return MessageResponse(message="Hábito excluído com sucesso")

    def archive_habit(self, raw_params: Any, raw_body: Any) -> MessageResponse:
        """
        Move a habit to Arquivado.

        The archive reason must be valid but is not kept anywhere.

        Raises:
            ValidationError, NotFoundError, AlreadyArchivedError
        """
        habit_id = self._parse_id(raw_params)
        reason = validate_payload(HabitArchive, raw_body)

        with self.store.transaction():
            existing = self._require(habit_id)
            if existing.status == HabitStatus.ARCHIVED.value:
                raise AlreadyArchivedError()
            self.store.update(habit_id, status=HabitStatus.ARCHIVED.value)

        logger.info("Habit %s archived", habit_id)
        logger.debug("Archive reason for %s: %s", habit_id, reason.motivo_arquivamento)
        return MessageResponse(message="Hábito arquivado com sucesso")

    def restore_habit(self, raw_params: Any) -> MessageResponse:
        """
        Move a habit back to Ativo.

        Restoring does not consult the active-habit limit; the cap is only
        enforced on creation.

        Raises:
            ValidationError, NotFoundError, AlreadyActiveError
        """
        habit_id = self._parse_id(raw_params)

        with self.store.transaction():
            existing = self._require(habit_id)
            if existing.status == HabitStatus.ACTIVE.value:
                raise AlreadyActiveError()
            self.store.update(habit_id, status=HabitStatus.ACTIVE.value)

        logger.info("Habit %s restored", habit_id)
        return MessageResponse(message="Hábito restaurado com sucesso")


# ── Dependency ────────────────────────────────────────────────────────────

def get_habit_service(request: Request) -> HabitService:
    """FastAPI dependency: the service instance created by create_app()."""
    return request.app.state.habit_service
