"""asyncquery: race-safe async query controller with a small reactive runtime."""

from importlib.metadata import version as _version

__version__ = _version("asyncquery")

from asyncquery._tracking import action, get_pending_count, transaction, untracked
from asyncquery.controller import QueryController
from asyncquery.errors import AsyncQueryError, ControllerDisposedError, VariablesError
from asyncquery.hook import QueryHandle, QueryOptions, use_query
from asyncquery.memo import VariableMemo, memo_when_equal, structurally_equal
from asyncquery.observable import Observable
from asyncquery.reaction import Reaction, autorun, reaction
from asyncquery.result import QueryResult, ResultRecord
from asyncquery.signature import UNSET, ParameterizedQuery, ZeroArgQuery, as_query, merge_variables
# textual NOT auto-imported — opt-in only

__all__ = [
    "UNSET",
    "QueryController",
    "QueryHandle",
    "QueryOptions",
    "QueryResult",
    "ResultRecord",
    "use_query",
    "ZeroArgQuery",
    "ParameterizedQuery",
    "as_query",
    "merge_variables",
    "VariableMemo",
    "memo_when_equal",
    "structurally_equal",
    "AsyncQueryError",
    "ControllerDisposedError",
    "VariablesError",
    "Observable",
    "Reaction",
    "autorun",
    "reaction",
    "action",
    "transaction",
    "untracked",
    "get_pending_count",
]
