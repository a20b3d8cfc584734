"""Federation cluster membership management (kubefed join / unjoin)."""

__version__ = "0.1.0"
