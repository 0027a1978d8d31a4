"""Regras de transição do ciclo de vida de um job."""

from typing import Dict, List, Set

from ..errors import InvalidTransitionError
from ..models.transcription import TranscriptionStatus

_TERMINAL_STATES: Set[TranscriptionStatus] = {
    TranscriptionStatus.DONE,
    TranscriptionStatus.FAILED,
}

# `done` só aceita voltar a `translating`: traduzir um job já concluído.
_ALLOWED_TRANSITIONS: Dict[TranscriptionStatus, Set[TranscriptionStatus]] = {
    TranscriptionStatus.PENDING: {
        TranscriptionStatus.DOWNLOADING,
        TranscriptionStatus.PROCESSING,
        TranscriptionStatus.TRANSCRIBING,
        TranscriptionStatus.FAILED,
    },
    TranscriptionStatus.DOWNLOADING: {
        TranscriptionStatus.PROCESSING,
        TranscriptionStatus.TRANSCRIBING,
        TranscriptionStatus.FAILED,
    },
    TranscriptionStatus.PROCESSING: {
        TranscriptionStatus.TRANSCRIBING,
        TranscriptionStatus.TRANSLATING,
        TranscriptionStatus.DONE,
        TranscriptionStatus.FAILED,
    },
    TranscriptionStatus.TRANSCRIBING: {
        TranscriptionStatus.TRANSLATING,
        TranscriptionStatus.DONE,
        TranscriptionStatus.FAILED,
    },
    TranscriptionStatus.TRANSLATING: {TranscriptionStatus.DONE, TranscriptionStatus.FAILED},
    TranscriptionStatus.DONE: {TranscriptionStatus.TRANSLATING},
    TranscriptionStatus.FAILED: set(),
}


def is_terminal(status: TranscriptionStatus) -> bool:
    return status in _TERMINAL_STATES


def allowed_next_statuses(status: TranscriptionStatus) -> List[TranscriptionStatus]:
    """Sucessores permitidos, em ordem determinística."""
    return sorted(_ALLOWED_TRANSITIONS.get(status, set()), key=lambda s: s.value)


def ensure_transition(old_status: TranscriptionStatus, new_status: TranscriptionStatus) -> None:
    """Valida a transição; manter o mesmo status é sempre permitido."""
    if old_status == new_status:
        return

    if new_status not in _ALLOWED_TRANSITIONS.get(old_status, set()):
        raise InvalidTransitionError(
            f"Transição inválida: {old_status.value} -> {new_status.value}",
            {
                "current_status": old_status.value,
                "attempted_status": new_status.value,
                "allowed_next_statuses": [s.value for s in allowed_next_statuses(old_status)],
            },
        )
