"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path et fournit les fixtures partagées:
générateur d'avatars, publieur et orchestrateur de mint branchés sur les fakes.
"""

import os
import random
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from zodiac_backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Aucun appel réel au fournisseur IA pendant les tests
os.environ.pop("OPENAI_API_KEY", None)

from zodiac_backend.domain.avatar_generator import AvatarContentGenerator  # noqa: E402
from zodiac_backend.domain.mint_orchestrator import MintOrchestrator  # noqa: E402
from zodiac_backend.domain.publisher import ContentPublisher  # noqa: E402
from tests.fakes import (  # noqa: E402
    CHARACTER_JSON,
    FakeImageGenerator,
    FakeLLM,
    FakeNFTProgram,
    FakeRpc,
    FakeStorage,
)

SEED = 42


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM(CHARACTER_JSON, "Born beneath a blazing summer sky, your avatar glows.")


@pytest.fixture
def images() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def generator(llm, images) -> AvatarContentGenerator:
    return AvatarContentGenerator(llm, images, rng=random.Random(SEED))


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def publisher(storage) -> ContentPublisher:
    return ContentPublisher(storage)


@pytest.fixture
def rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture
def nft_program() -> FakeNFTProgram:
    return FakeNFTProgram()


@pytest.fixture
def orchestrator(rpc, nft_program, generator, publisher) -> MintOrchestrator:
    return MintOrchestrator(rpc, nft_program, generator, publisher, network="devnet")
