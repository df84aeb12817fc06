# foodprint/schemas/wallet.py
from pydantic import BaseModel, ConfigDict, Field


class WalletConnectRequest(BaseModel):
    """
    Body of POST /wallet/connect (camelCase, as sent by the browser).

    walletAddress and userRole are optional here on purpose: missing values
    are reported as InvalidAddress / InvalidRole by the service rather than
    as a generic validation failure.
    """

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str | None = Field(default=None, alias="walletAddress")
    user_role: str | None = Field(default=None, alias="userRole")
    signature: str | None = None
    message: str | None = None


class WalletConnectResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Wallet connected successfully!"
    wallet_address: str = Field(alias="walletAddress")
    user_role: str = Field(alias="userRole")
    access_token: str = Field(alias="accessToken")


class WalletDisconnectResponse(BaseModel):
    success: bool = True
    message: str = "Wallet disconnected successfully!"


class WalletStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    wallet_connected: bool = Field(alias="walletConnected")
    wallet_address: str | None = Field(default=None, alias="walletAddress")
    user_role: str | None = Field(default=None, alias="userRole")
