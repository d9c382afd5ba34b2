from backend.engine.gamescoring.scoring import RepairScore, ScoringEngine

__all__ = ["RepairScore", "ScoringEngine"]
