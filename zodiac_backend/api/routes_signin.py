"""Route du message de connexion wallet (`POST /api/signin-message`)."""

from fastapi import APIRouter

from zodiac_backend.api.schemas import SigninMessageRequest, SigninMessageResponse
from zodiac_backend.domain.signin_message import SigninMessage

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/signin-message", response_model=SigninMessageResponse)
def signin_message(payload: SigninMessageRequest):
    """Émet un message à signer contenant le wallet et un nonce neuf."""
    msg = SigninMessage.issue(payload.wallet_address.strip())
    return SigninMessageResponse(
        message=msg.message, nonce=msg.nonce, wallet_address=msg.public_key
    )
