from backend.engine.gameverifier.ordering import OrderingChecker
from backend.engine.gameverifier.verifier import RepairVerifier

__all__ = ["OrderingChecker", "RepairVerifier"]
