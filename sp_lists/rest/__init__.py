from .exceptions import (AlreadyInBatchError, BatchAlreadyExecutedError, BatchNotSupportedError,
                         ODataIdError, SharepointError, SharepointHttpError)
from .lists import List, ListAddResult, ListEnsureResult, ListUpdateResult, Lists
from .queryable import Queryable, QueryableCollection, QueryableInstance, then
from .types import CamlQuery, ChangeLogItemQuery, ChangeQuery, ChangeToken, ControlMode
from .web import Web

__all__ = [
    "AlreadyInBatchError",
    "BatchAlreadyExecutedError",
    "BatchNotSupportedError",
    "CamlQuery",
    "ChangeLogItemQuery",
    "ChangeQuery",
    "ChangeToken",
    "ControlMode",
    "List",
    "ListAddResult",
    "ListEnsureResult",
    "ListUpdateResult",
    "Lists",
    "ODataIdError",
    "Queryable",
    "QueryableCollection",
    "QueryableInstance",
    "SharepointError",
    "SharepointHttpError",
    "Web",
    "then",
]
