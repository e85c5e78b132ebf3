"""gamebot - conversational gateway for a game-discovery assistant."""

from loguru import logger

__version__ = "0.1.0"
__logo__ = "🎮"

logger.disable("gamebot")
