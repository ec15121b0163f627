"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, clients IA, stockage Arweave, clients
Solana, services du domaine) et expose un singleton `container` utilisé par le
reste de l'application. Aucun appel réseau n'est fait à la construction.
"""

from zodiac_backend.core.settings import get_settings
from zodiac_backend.domain.avatar_generator import AvatarContentGenerator
from zodiac_backend.domain.mint_orchestrator import MintOrchestrator
from zodiac_backend.domain.publisher import ContentPublisher
from zodiac_backend.infra.llm.openai_client import OpenAIImageGenerator, OpenAILLM
from zodiac_backend.infra.solana.nft_program import NFTProgramClient
from zodiac_backend.infra.solana.rpc_client import SolanaRpcClient, cluster_endpoint
from zodiac_backend.infra.storage.arweave_client import ArweaveUploaderClient


class Container:
    def __init__(self):
        self.settings = get_settings()
        s = self.settings
        self.llm = OpenAILLM(
            api_key=s.OPENAI_API_KEY, model=s.OPENAI_TEXT_MODEL, timeout=s.OPENAI_TIMEOUT_S
        )
        self.images = OpenAIImageGenerator(
            api_key=s.OPENAI_API_KEY, model=s.OPENAI_IMAGE_MODEL, timeout=s.OPENAI_TIMEOUT_S
        )
        self.storage = ArweaveUploaderClient(
            uploader_url=s.ARWEAVE_UPLOADER_URL,
            gateway_url=s.ARWEAVE_GATEWAY_URL,
            api_key=s.ARWEAVE_API_KEY,
            timeout=s.ARWEAVE_TIMEOUT_S,
        )
        self.generator = AvatarContentGenerator(self.llm, self.images)
        self.publisher = ContentPublisher(self.storage)
        self._orchestrators: dict[str, MintOrchestrator] = {}

    def orchestrator_for(self, network: str | None = None) -> MintOrchestrator:
        """Orchestrateur de mint pour un cluster (créé à la première demande).

        L'URL RPC personnalisée ne s'applique qu'au cluster configuré par défaut.
        """
        s = self.settings
        network = network or s.SOLANA_NETWORK
        if network not in self._orchestrators:
            override = s.SOLANA_RPC_URL if network == s.SOLANA_NETWORK else None
            rpc = SolanaRpcClient(cluster_endpoint(network, override), commitment=s.SOLANA_COMMITMENT)
            self._orchestrators[network] = MintOrchestrator(
                rpc,
                NFTProgramClient(s.MINT_BUILDER_URL, rpc),
                self.generator,
                self.publisher,
                network=network,
                symbol=s.NFT_SYMBOL,
                seller_fee_basis_points=s.NFT_SELLER_FEE_BASIS_POINTS,
            )
        return self._orchestrators[network]


container = Container()
