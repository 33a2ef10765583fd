from .batch import ODataBatch
from .client import SharepointClient

__all__ = ["ODataBatch", "SharepointClient"]
