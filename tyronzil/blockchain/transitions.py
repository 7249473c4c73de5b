"""
Transition parameter builders for DID operations.

Each builder returns the parameters in the positional order expected by
the tyron-smart-contract transition of the same name. Values are passed
through untouched; commitment and document formats are the caller's concern.
"""
from enum import Enum
from typing import List

from tyronzil.models import TransitionParam


class TransitionTag(str, Enum):
    """Transitions of the tyron-smart-contract"""
    CREATE = "DidCreate"
    UPDATE = "DidUpdate"
    RECOVER = "DidRecover"
    DEACTIVATE = "DidDeactivate"


def _string_param(vname: str, value: str) -> TransitionParam:
    return TransitionParam(vname=vname, type="String", value=value)


def create(
    didtyron: str,
    doc: str,
    update_commitment: str,
    recovery_commitment: str
) -> List[TransitionParam]:
    return [
        _string_param("didtyron", didtyron),
        _string_param("doc", doc),
        _string_param("updateCommitment", update_commitment),
        _string_param("recoveryCommitment", recovery_commitment),
    ]


def update(
    update_commitment: str,
    new_doc: str,
    new_update_commitment: str
) -> List[TransitionParam]:
    return [
        _string_param("updateCommitment", update_commitment),
        _string_param("newDoc", new_doc),
        _string_param("newUpdateCommitment", new_update_commitment),
    ]


def recover(
    recovery_commitment: str,
    new_doc: str,
    new_update_commitment: str,
    new_recovery_commitment: str
) -> List[TransitionParam]:
    return [
        _string_param("recoveryCommitment", recovery_commitment),
        _string_param("newDoc", new_doc),
        _string_param("newUpdateCommitment", new_update_commitment),
        _string_param("newRecoveryCommitment", new_recovery_commitment),
    ]


def deactivate(recovery_commitment: str) -> List[TransitionParam]:
    return [_string_param("recoveryCommitment", recovery_commitment)]
