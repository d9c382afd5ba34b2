from backend.engine.workshop.generator import WorkshopGenerator
from backend.engine.workshop.workshop import Workshop

__all__ = ["Workshop", "WorkshopGenerator"]
