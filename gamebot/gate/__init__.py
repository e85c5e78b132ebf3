"""Domain admission gate."""

from gamebot.gate.domain import BLOCK_REPLIES, DomainGate

__all__ = ["BLOCK_REPLIES", "DomainGate"]
