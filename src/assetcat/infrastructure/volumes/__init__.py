from .registry import VolumeRegistry

__all__ = ["VolumeRegistry"]
