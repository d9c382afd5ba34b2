from backend.engine.achievements.evaluator import AchievementEvaluator

__all__ = ["AchievementEvaluator"]
