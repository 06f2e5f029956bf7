"""
Query: field resolution over a compiled schema.

    from resolvent import query as Q

    result = await Q.execute(
        schema,
        Q.selection("bookById", "id", "name", Q.selection("author", "firstName"), id="book-1"),
    )
    result.data    # {"bookById": {"id": "book-1", "name": ..., "author": {...}}}
    result.errors  # () or FieldErrors, one per failed field
"""

from resolvent.query._selection import SelectionNode, selection
from resolvent.query._errors import (
    FieldErrorKind,
    FieldError,
    UnknownArgument,
    ArgumentTypeError,
    ArgumentError,
)
from resolvent.query._binder import bind_arguments
from resolvent.query._probe import ExecutionProbe, DefaultExecutionProbe
from resolvent.query._run import (
    ExecutionResult,
    DeadlineExceeded,
    Executor,
    ExecutorBuilder,
    executor,
    execute,
)
from resolvent.query import policy

__all__ = (
    "SelectionNode",
    "selection",
    "FieldErrorKind",
    "FieldError",
    "UnknownArgument",
    "ArgumentTypeError",
    "ArgumentError",
    "bind_arguments",
    "ExecutionProbe",
    "DefaultExecutionProbe",
    "ExecutionResult",
    "DeadlineExceeded",
    "Executor",
    "ExecutorBuilder",
    "executor",
    "execute",
    "policy",
)
