"""Audio package."""

from .sounds import SoundManager, CUE_IDS

__all__ = ["SoundManager", "CUE_IDS"]
