"""
sp_lists - typed bindings for the SharePoint Lists REST api.

This package contains three main modules:
- clients: HTTP transport and deferred request batches
- rest: url descriptors for lists and their sub-resources
- configurations: connection settings
"""

__version__ = "0.1.0"

from .clients import ODataBatch, SharepointClient
from .configurations import SharepointConfiguration
from .rest import (CamlQuery, ChangeLogItemQuery, ChangeQuery, ControlMode, List, Lists,
                   SharepointError, SharepointHttpError, Web)

__all__ = [
    "CamlQuery",
    "ChangeLogItemQuery",
    "ChangeQuery",
    "ControlMode",
    "List",
    "Lists",
    "ODataBatch",
    "SharepointClient",
    "SharepointConfiguration",
    "SharepointError",
    "SharepointHttpError",
    "Web",
]
