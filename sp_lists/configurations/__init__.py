from .sharepoint import SharepointConfiguration

__all__ = ["SharepointConfiguration"]
