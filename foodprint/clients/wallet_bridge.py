# foodprint/clients/wallet_bridge.py
"""
Client side of wallet linking.

Mirrors what the browser does with MetaMask / WalletConnect, but signs with
a local eth-account key:

    bridge = WalletBridge("https://foodprint.example", Account.from_key(key))
    bridge.connect(role="farmer")
    bridge.status()

The bridge keeps the "displayed" state (address, role, connected) and the
session token returned by the server.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable

import requests
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

logger = logging.getLogger(__name__)

ROLE_CHOICES: list[tuple[str, str]] = [
    ("farmer", "Grow and harvest produce"),
    ("wholesaler", "Buy and distribute bulk produce"),
    ("distributor", "Transport and deliver products"),
    ("retailer", "Sell to end consumers"),
    ("admin", "Manage the platform"),
]

ENTRY_KINDS = ("harvest", "storage")


class WalletBridgeError(Exception):
    """Server rejected a wallet request, or the bridge is not connected."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _timestamp(at: datetime | None) -> str:
    at = at or datetime.now(timezone.utc)
    return at.isoformat().replace("+00:00", "Z")


def build_link_message(address: str, role: str, at: datetime | None = None) -> str:
    """Human-readable message the user signs to prove wallet ownership."""
    return f"FoodPrint: Link wallet {address} as {role} at {_timestamp(at)}"


def build_entry_message(kind: str, log_id: str, at: datetime | None = None) -> str:
    """Message signed when adding a harvest/storage entry to the chain."""
    if kind not in ENTRY_KINDS:
        raise ValueError(f"Unknown entry kind: {kind}")
    return f"FoodPrint: Sign {kind} entry {log_id} at {_timestamp(at)}"


class WalletBridge:
    """
    Talks to the /wallet endpoints on behalf of one signing account.

    Provider events are forwarded by the caller:
      - on_accounts_changed: switch account (or disconnect on empty list)
      - on_chain_changed: drop all local state, like a page reload
    """

    def __init__(
        self,
        base_url: str,
        account: LocalAccount | None,
        http: requests.Session | None = None,
        api_prefix: str = "/app",
    ):
        self.base_url = base_url.rstrip("/") + api_prefix
        self.account = account
        self.http = http or requests.Session()
        self.address: str | None = account.address if account else None
        self.role: str | None = None
        self.token: str | None = None

    # ----- Helpers -----

    @property
    def connected(self) -> bool:
        return self.token is not None

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        resp = self.http.request(
            method,
            self.base_url + path,
            headers=self._headers(),
            **kwargs,
        )
        try:
            data = resp.json()
        except ValueError:
            data = {"success": False, "message": resp.text}

        if resp.status_code >= 400 or not data.get("success"):
            message = data.get("message") or f"HTTP {resp.status_code}"
            logger.error("Wallet request %s %s failed: %s", method, path, message)
            raise WalletBridgeError(message, status_code=resp.status_code)
        return data

    def _require_account(self) -> LocalAccount:
        if self.account is None:
            raise WalletBridgeError("Wallet not connected")
        return self.account

    # ----- Operations -----

    def sign_data(self, data: Any) -> dict[str, str]:
        """
        Sign `data` with the active account.

        Strings are signed verbatim, anything else as JSON.
        """
        account = self._require_account()
        message = data if isinstance(data, str) else json.dumps(data)
        signed = account.sign_message(encode_defunct(text=message))
        return {
            "message": message,
            "signature": "0x" + bytes(signed.signature).hex(),
            "address": account.address,
        }

    def connect(
        self,
        role: str | None = None,
        choose_role: Callable[[list[tuple[str, str]]], str | None] | None = None,
    ) -> dict[str, Any] | None:
        """
        Link the active account to a FoodPrint user.

        If no role is given, `choose_role` is asked to pick one from
        ROLE_CHOICES; returning None cancels and nothing is sent.

        Returns the server response, or None when cancelled.
        """
        account = self._require_account()
        if role is None:
            if choose_role is None:
                raise WalletBridgeError("No role selected")
            role = choose_role(ROLE_CHOICES)
            if role is None:
                logger.info("Role selection cancelled")
                return None

        signed = self.sign_data(build_link_message(account.address, role))
        data = self._request(
            "POST",
            "/wallet/connect",
            json={
                "walletAddress": account.address,
                "signature": signed["signature"],
                "message": signed["message"],
                "userRole": role,
            },
        )
        self.token = data.get("accessToken")
        self.address = data["walletAddress"]
        self.role = data["userRole"]
        logger.info("Wallet linked successfully with role: %s", self.role)
        return data

    def disconnect(self) -> None:
        """Unlink the wallet server-side, then clear local state."""
        self._request("POST", "/wallet/disconnect")
        self.reset()

    def status(self) -> dict[str, Any]:
        data = self._request("GET", "/wallet/status")
        self.role = data.get("userRole")
        return data

    def reset(self) -> None:
        """Forget session and displayed wallet state."""
        self.token = None
        self.role = None
        self.address = self.account.address if self.account else None

    # ----- Provider events -----

    def on_accounts_changed(
        self,
        accounts: list[LocalAccount],
    ) -> None:
        """
        Wallet switched accounts.

        Empty list means the user disconnected the wallet from the
        provider side; otherwise the first account becomes active.
        """
        if not accounts:
            self.account = None
            self.reset()
            logger.info("Wallet disconnected")
            return

        self.account = accounts[0]
        self.address = self.account.address
        self.role = None

    def on_chain_changed(self, chain_id: int) -> None:
        logger.info("Chain changed to %s, resetting wallet state", chain_id)
        self.reset()
