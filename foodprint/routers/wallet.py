# foodprint/routers/wallet.py
from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from foodprint.core.auth import login, require_auth
from foodprint.core.config import get_settings
from foodprint.database import get_session
from foodprint.models.user import User
from foodprint.repositories.user_repo import UserRepository
from foodprint.schemas.wallet import (
    WalletConnectRequest,
    WalletConnectResponse,
    WalletDisconnectResponse,
    WalletStatusResponse,
)
from foodprint.services.wallet_service import WalletService

settings = get_settings()

router = APIRouter(prefix="/wallet", tags=["Wallet"])

repo = UserRepository()


def get_wallet_service() -> WalletService:
    """
    Build the wallet service from current settings.

    Exposed as a dependency so tests can swap the signature policy.
    """
    return WalletService(
        repo,
        require_signature=settings.REQUIRE_WALLET_SIGNATURE,
        email_domain=settings.WALLET_EMAIL_DOMAIN,
    )


@router.post(
    "/connect",
    response_model=WalletConnectResponse,
    responses={400: {"description": "Invalid wallet address, role or signature"}},
)
def connect_wallet(
    payload: WalletConnectRequest,
    response: Response,
    session: Session = Depends(get_session),
    service: WalletService = Depends(get_wallet_service),
):
    """
    Connect a wallet address to a user account.

    - Unknown wallet: creates a wallet-only account with the chosen role.
    - Known wallet: updates the account's role.
    - `signature` + `message` (EIP-191 personal_sign) are verified when both
      are sent; whether they are mandatory is a server setting.

    On success the caller is logged in (session cookie + accessToken).
    """
    result = service.connect(
        session,
        payload.wallet_address,
        payload.user_role,
        signature=payload.signature,
        message=payload.message,
    )
    token = login(response, result.user)
    return WalletConnectResponse(
        wallet_address=result.wallet_address,
        user_role=result.user_role.value,
        access_token=token,
    )


@router.post(
    "/disconnect",
    response_model=WalletDisconnectResponse,
    responses={401: {"description": "User not authenticated"}},
)
def disconnect_wallet(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: WalletService = Depends(get_wallet_service),
):
    """
    Disconnect the wallet from the authenticated user's account.

    The supply-chain role is kept.
    """
    service.disconnect(session, current_user)
    return WalletDisconnectResponse()


@router.get(
    "/status",
    response_model=WalletStatusResponse,
    responses={401: {"description": "User not authenticated"}},
)
def wallet_status(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    service: WalletService = Depends(get_wallet_service),
):
    """Get wallet connection status for the authenticated user."""
    status = service.status(session, current_user)
    return WalletStatusResponse(
        wallet_connected=status.wallet_connected,
        wallet_address=status.wallet_address,
        user_role=status.user_role,
    )
