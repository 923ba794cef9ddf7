"""Storage for intermediate frames and run tables."""

from boutstats.storage.frame_storage import FrameStorage

__all__ = ["FrameStorage"]
