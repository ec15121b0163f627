"""Interface de stockage durable adressé par contenu."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageClient(ABC):
    """Soumission d'octets à un stockage permanent (Arweave)."""

    @abstractmethod
    async def submit(
        self, data: bytes, content_type: str, tags: dict[str, str] | None = None
    ) -> str:
        """Soumet les octets et retourne l'identifiant de transaction.

        Lève `StorageNetworkError` si le service est injoignable ou répond en erreur.
        """
        ...

    @abstractmethod
    def public_url(self, transaction_id: str) -> str:
        """URL publique sur la passerelle pour un identifiant de transaction."""
        ...
