"""Wallet connectors supplying the account identifier faces are registered to."""

import logging
import re
from typing import Optional

from facepay.config import WALLET_ADDRESS
from facepay.errors import WalletUnavailable

logger = logging.getLogger(__name__)

ETH_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class WalletConnector:
    """Returns the connected account, or raises WalletUnavailable."""

    def connect(self) -> str:
        raise NotImplementedError


class StaticWallet(WalletConnector):
    """A wallet whose address is known up front (env var or command line)."""

    def __init__(self, address: Optional[str] = None):
        if address is None:
            address = WALLET_ADDRESS
        self.address = (address or "").strip()

    def connect(self):
        if not self.address:
            raise WalletUnavailable("No wallet configured. Set FACEPAY_WALLET or pass an address.")
        if not ETH_ADDRESS_RE.match(self.address):
            logger.warning(f"Wallet address {self.address!r} does not look like an Ethereum address")
        return self.address


class PromptWallet(WalletConnector):
    """Asks for the account address on the terminal."""

    def __init__(self, prompt=input):
        self.prompt = prompt

    def connect(self):
        try:
            address = self.prompt("Enter your wallet address: ")
        except (EOFError, KeyboardInterrupt) as e:
            raise WalletUnavailable("Failed to connect wallet.") from e
        return StaticWallet(address).connect()
