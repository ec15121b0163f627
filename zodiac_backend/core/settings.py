"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default

SolanaNetwork = Literal["devnet", "mainnet-beta"]


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "zodiac-nft-backend"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "DEBUG"

    CORS_ORIGINS: list[AnyHttpUrl] | list[str] = []

    # Fournisseur IA (texte + image)
    OPENAI_API_KEY: str | None = None
    OPENAI_TEXT_MODEL: str = "gpt-4-turbo-preview"
    OPENAI_IMAGE_MODEL: str = "gpt-image-1"
    OPENAI_TIMEOUT_S: float = 60.0

    # Stockage durable (service d'upload Arweave)
    ARWEAVE_UPLOADER_URL: str = "http://arweave-uploader:8001"
    ARWEAVE_GATEWAY_URL: str = "https://arweave.net"
    ARWEAVE_API_KEY: str | None = None
    ARWEAVE_TIMEOUT_S: float = 20.0

    # Solana
    SOLANA_NETWORK: SolanaNetwork = "devnet"
    SOLANA_RPC_URL: str | None = None
    SOLANA_COMMITMENT: str = "confirmed"
    MINT_BUILDER_URL: str = "http://mint-builder:8002"
    NFT_SYMBOL: str = "ZODIAC"
    NFT_SELLER_FEE_BASIS_POINTS: int = 500


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
