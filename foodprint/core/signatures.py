# foodprint/core/signatures.py
"""
Wallet signature verification (EIP-191 "personal_sign" messages).

MetaMask / WalletConnect sign a plaintext message with the
"\\x19Ethereum Signed Message:\\n<len>" prefix. We recover the signer
address from (message, signature) and compare it to the address the
client claims to own.
"""

import logging

from eth_account import Account
from eth_account.messages import encode_defunct

from foodprint.core.exceptions import InvalidSignature

logger = logging.getLogger(__name__)


def recover_address(message: str, signature: str) -> str:
    """
    Recover the checksummed address that signed `message`.

    Raises:
        InvalidSignature: if the signature cannot be decoded or recovered
            (bad hex, wrong length, invalid recovery id, ...).
    """
    try:
        return Account.recover_message(
            encode_defunct(text=message),
            signature=signature,
        )
    except Exception as e:
        logger.warning("Signature recovery failed: %s", e)
        raise InvalidSignature() from e


def verify(message: str, signature: str, claimed_address: str) -> bool:
    """
    True iff `signature` over `message` was produced by `claimed_address`.

    Address comparison is case-insensitive, so checksummed and lowercase
    forms both match. A well-formed signature from someone else returns
    False; only a malformed signature raises InvalidSignature.

    Corruption is not always detectable as malformed: a bad length or
    recovery byte (v) raises, but a flipped byte in r or s usually still
    recovers *some* address, just not the claimed one, so the result is
    False.
    """
    recovered = recover_address(message, signature)
    return recovered.lower() == claimed_address.lower()
