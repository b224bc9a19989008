"""Typed interfaces for adapter-layer responsibilities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from position_ledger.ledger import PositionTransition


class WalletAssetType(str, Enum):
    """Asset classes the online wallet distinguishes when registering trades."""

    TICKER = "Ticker"
    FII = "fii"


@dataclass(frozen=True)
class WalletTicker:
    """Wallet-side identity of one ticker.

    Attributes:
        ticker_id: Upstream numeric ticker identifier.
        name: Upstream display name.
        asset_type: Asset class used in trade payloads.
    """

    ticker_id: int
    name: str
    asset_type: WalletAssetType


class WalletExportPort(Protocol):
    """Port definition for pushing applied transactions to an online wallet."""

    def adapter_source_name(self) -> str:
        """Return adapter target identifier for diagnostics.

        Returns:
            str: Human-readable upstream target identifier.
        """

    def adapter_resolve_ticker(self, ticker: str) -> WalletTicker:
        """Resolve one ticker code to its wallet-side identity.

        Args:
            ticker: Ticker code.

        Returns:
            WalletTicker: Upstream ticker identity.

        Raises:
            LookupError: Raised when the ticker is unknown upstream.
        """

    def adapter_add_trade(self, transition: PositionTransition) -> None:
        """Register one applied transaction as a wallet trade.

        Args:
            transition: Applied ledger transition.

        Raises:
            ConnectionError: Raised when upstream communication fails.
            TimeoutError: Raised when the request exceeds its timeout.
        """
