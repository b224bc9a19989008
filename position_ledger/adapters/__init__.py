"""Adapter layer package for online wallet integration boundaries."""

from .interfaces import WalletAssetType, WalletExportPort, WalletTicker
from .investidor10_wallet import Investidor10WalletAdapter, adapter_format_wallet_price
from .wallet_export_errors import (
	WalletExportConnectionError,
	WalletExportError,
	WalletExportResponseError,
	WalletExportTimeoutError,
	WalletTickerNotFoundError,
)

__all__ = [
	"Investidor10WalletAdapter",
	"WalletAssetType",
	"WalletExportConnectionError",
	"WalletExportError",
	"WalletExportPort",
	"WalletExportResponseError",
	"WalletExportTimeoutError",
	"WalletTicker",
	"WalletTickerNotFoundError",
	"adapter_format_wallet_price",
]
