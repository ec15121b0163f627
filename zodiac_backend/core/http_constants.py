"""Constantes HTTP et unités pour éviter les valeurs magiques dans le code.

Ce module définit les codes de statut HTTP utilisés par l'API ainsi que les unités
monétaires Solana partagées entre le domaine et l'infrastructure.
"""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502

# Délais réseau par défaut (secondes)
DEFAULT_TIMEOUT = 30

# 1 SOL = 10^9 lamports
LAMPORTS_PER_SOL = 1_000_000_000
