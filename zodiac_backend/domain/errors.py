"""Taxonomie des erreurs du domaine.

Chaque exception porte un `ErrorKind` stable, utilisé par l'API pour choisir le
statut HTTP et par l'orchestrateur de mint pour classer les échecs.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Catégories d'erreurs exposées aux appelants."""

    INVALID_INPUT = "INVALID_INPUT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    USER_REJECTED = "USER_REJECTED"
    GENERATION_FAILED = "GENERATION_FAILED"
    PUBLISH_ERROR = "PUBLISH_ERROR"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    TOO_LARGE = "TOO_LARGE"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN = "UNKNOWN"
    INVALID_DATE = "INVALID_DATE"
    UNRESOLVED_SIGN = "UNRESOLVED_SIGN"


class ZodiacAppError(Exception):
    """Erreur de base du domaine, avec un type et des détails optionnels."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInputError(ZodiacAppError):
    kind = ErrorKind.INVALID_INPUT


class InvalidDateError(ZodiacAppError):
    """Date calendaire invalide (mois/jour hors calendrier grégorien)."""

    kind = ErrorKind.INVALID_DATE


class UnresolvedSignError(ZodiacAppError):
    """Aucun signe ne couvre la date: violation d'invariant de la table."""

    kind = ErrorKind.UNRESOLVED_SIGN


class GenerationFailedError(ZodiacAppError):
    kind = ErrorKind.GENERATION_FAILED


class PublishError(ZodiacAppError):
    kind = ErrorKind.PUBLISH_ERROR


class UnsupportedTypeError(PublishError):
    kind = ErrorKind.UNSUPPORTED_TYPE


class TooLargeError(PublishError):
    kind = ErrorKind.TOO_LARGE


class StorageNetworkError(PublishError):
    kind = ErrorKind.NETWORK_ERROR


class ProviderError(ZodiacAppError):
    """Échec d'un appel au fournisseur IA (absorbé par les fallbacks)."""

    kind = ErrorKind.GENERATION_FAILED


class WalletRejectedError(ZodiacAppError):
    """L'utilisateur a refusé la signature dans son wallet."""

    kind = ErrorKind.USER_REJECTED


class RpcError(ZodiacAppError):
    """Erreur renvoyée par le nœud RPC ou le programme NFT."""

    kind = ErrorKind.NETWORK_ERROR


class InsufficientFundsError(ZodiacAppError):
    """Solde du wallet inférieur au coût estimé du mint."""

    kind = ErrorKind.INSUFFICIENT_FUNDS
