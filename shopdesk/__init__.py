"""ShopDesk: retail point-of-sale backend with PDF invoices."""

__version__ = "1.0.0"
