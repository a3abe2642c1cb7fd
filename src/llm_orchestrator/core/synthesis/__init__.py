"""Reply synthesis from tool results."""

from .synthesizer import Synthesizer

__all__ = ["Synthesizer"]
