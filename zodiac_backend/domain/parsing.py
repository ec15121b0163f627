"""Analyse validée des réponses JSON non typées des fournisseurs IA.

Le résultat est étiqueté: `Parsed` (réponse valide), `Fallback` (réponse inutilisable,
valeur de secours construite) ou `Unrecoverable` (même le secours a échoué).
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True)
class Fallback(Generic[T]):
    value: T
    reason: str


@dataclass(frozen=True)
class Unrecoverable:
    reason: str


ParseOutcome = Parsed[T] | Fallback[T] | Unrecoverable


def extract_json_object(raw: str | None) -> dict[str, Any] | None:
    """Retourne l'objet JSON du texte brut, ou le premier bloc `{...}` qu'il contient."""
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_RE.search(raw)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def _fallback(build: Callable[[], T], reason: str) -> Fallback[T] | Unrecoverable:
    try:
        return Fallback(build(), reason)
    except Exception as err:  # le constructeur de secours ne doit jamais lever
        return Unrecoverable(f"{reason}; fallback failed: {err}")


def parse_model(
    raw: str | None,
    model: type[T],
    fallback: Callable[[], T],
) -> ParseOutcome[T]:
    """Valide `raw` contre `model`; construit la valeur de secours sinon."""
    data = extract_json_object(raw)
    if data is None:
        return _fallback(fallback, "no JSON object in response")
    try:
        return Parsed(model.model_validate(data))
    except ValidationError as err:
        return _fallback(fallback, f"invalid shape: {err.error_count()} error(s)")


def provider_failed(fallback: Callable[[], T], reason: str) -> Fallback[T] | Unrecoverable:
    """Résultat étiqueté quand l'appel fournisseur lui-même a échoué."""
    return _fallback(fallback, reason)
