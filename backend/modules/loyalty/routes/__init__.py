from .ledger_routes import router

__all__ = ["router"]
