from .fusion import ScoreFusion
from .orchestrator import SearchOrchestrator

__all__ = ['ScoreFusion', 'SearchOrchestrator']
