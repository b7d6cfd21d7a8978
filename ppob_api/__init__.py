"""PPOB reseller backend: auth, catalog, Digiflazz orders and reporting."""

__version__ = "1.0.0"
