"""
Query execution: depth-first field resolution with failure containment.

Note: Uses combinators for sibling fan-out instead of raw asyncio.gather.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from combinators import parallel, lift as L, NoError
from kungfu import Result, Ok, Error, LazyCoroResult

from resolvent._types import Path, Resolver, ResultValue
from resolvent.schema import FieldDefinition, Schema, TypeRef
from resolvent.query._binder import bind_arguments
from resolvent.query._errors import FieldError, FieldErrorKind
from resolvent.query._probe import DefaultExecutionProbe, ExecutionProbe
from resolvent.query._selection import SelectionNode
from resolvent.query.policy import Policy, Settings

# ═══════════════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """
    Result tree plus field-level errors.

    `data` keys follow selection order; errors are listed depth-first
    in selection order.
    """

    data: dict[str, ResultValue]
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


type _Outcome = tuple[ResultValue, tuple[FieldError, ...]]
type _Job = Callable[[], Awaitable[_Outcome]]


class DeadlineExceeded(Exception):
    """Execution deadline passed before or while a resolver ran."""


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _failed(kind: FieldErrorKind, message: str, path: Path) -> _Outcome:
    return None, (FieldError(kind, message, path),)


# ═══════════════════════════════════════════════════════════════════════════════
# _Execution: state of one run
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class _Execution:
    schema: Schema
    probe: ExecutionProbe
    concurrent: bool
    deadline: float | None
    limit: asyncio.Semaphore | None

    async def all(self, jobs: Sequence[tuple[Path, _Job]]) -> list[_Outcome]:
        """Run independent jobs; outcomes come back in job order."""
        if not self.concurrent or len(jobs) < 2:
            return [await self.settle(path, job) for path, job in jobs]

        def make_op(path: Path, job: _Job) -> LazyCoroResult[_Outcome, NoError]:
            async def impl() -> Result[_Outcome, NoError]:
                return Ok(await self.settle(path, job))
            return LazyCoroResult(impl)

        match await parallel(*[make_op(path, job) for path, job in jobs]):
            case Ok(outcomes):
                return list(outcomes)
            case Error(e):
                # settle() never fails; field failures travel inside _Outcome
                raise RuntimeError(f"sibling resolution failed: {e}")

    async def settle(self, path: Path, job: _Job) -> _Outcome:
        """Run one job; anything it raises becomes an error at `path`."""

        def on_error(exc: Exception) -> FieldError:
            self.probe.resolver_raised(path, exc)
            return FieldError(FieldErrorKind.RESOLVER_FAILURE, _describe(exc), path)

        match await L.catching_async(job, on_error=on_error):
            case Ok(outcome):
                return outcome
            case Error(error):
                return None, (error,)

    async def resolve_object(
        self,
        type_name: str,
        parent: object,
        nodes: Sequence[SelectionNode],
        path: Path,
    ) -> tuple[dict[str, ResultValue], tuple[FieldError, ...]]:
        outcomes = await self.all([
            ((*path, node.name), lambda node=node: self.resolve_field(type_name, parent, node, path))
            for node in nodes
        ])

        data: dict[str, ResultValue] = {}
        errors: list[FieldError] = []
        for node, (value, field_errors) in zip(nodes, outcomes):
            data[node.name] = value
            errors.extend(field_errors)
        return data, tuple(errors)

    async def resolve_field(
        self,
        type_name: str,
        parent: object,
        node: SelectionNode,
        path: Path,
    ) -> _Outcome:
        field_path = (*path, node.name)

        match self.prepare(type_name, node, field_path):
            case Error(error):
                return None, (error,)
            case Ok((fd, resolver, kwargs)):
                match await self.invoke(resolver, parent, kwargs, field_path):
                    case Error(error):
                        return None, (error,)
                    case Ok(value):
                        if value is not None:
                            shape_error = self.check_shape(fd, node, field_path)
                            if shape_error is not None:
                                return None, (shape_error,)
                        return await self.complete(fd.type, value, node, field_path)

    def prepare(
        self,
        type_name: str,
        node: SelectionNode,
        path: Path,
    ) -> Result[tuple[FieldDefinition, Resolver, dict[str, object]], FieldError]:
        """Look up definition and resolver, bind arguments."""
        match (
            self.schema.field_definition(type_name, node.name),
            self.schema.resolver_for(type_name, node.name),
        ):
            case (Error(missing), _):
                return Error(FieldError(FieldErrorKind.UNKNOWN_FIELD, str(missing), path))
            case (_, Error(_)):
                return Error(FieldError(
                    FieldErrorKind.UNKNOWN_FIELD,
                    f"no resolver bound to {type_name}.{node.name}",
                    path,
                ))
            case (Ok(fd), Ok(resolver)):
                match bind_arguments(fd, node.arguments, self.schema.scalars):
                    case Error(e):
                        return Error(FieldError(e.kind, str(e), path))
                    case Ok(kwargs):
                        return Ok((fd, resolver, kwargs))

    async def invoke(
        self,
        resolver: Resolver,
        parent: object,
        kwargs: dict[str, object],
        path: Path,
    ) -> Result[object, FieldError]:
        """
        Call the resolver, capturing anything it raises.

        Awaitables are awaited; a kungfu Result is unwrapped.
        """

        async def call() -> object:
            value = resolver(parent, **kwargs)
            if inspect.isawaitable(value):
                value = await value
            return value

        async def guarded() -> object:
            if self.limit is None:
                return await self.within_deadline(call)
            async with self.limit:
                return await self.within_deadline(call)

        def on_error(exc: Exception) -> FieldError:
            if not isinstance(exc, DeadlineExceeded):
                self.probe.resolver_raised(path, exc)
            return FieldError(FieldErrorKind.RESOLVER_FAILURE, _describe(exc), path)

        match await L.catching_async(guarded, on_error=on_error):
            case Ok(Ok(value)):
                return Ok(value)
            case Ok(Error(e)):
                return Error(FieldError(FieldErrorKind.RESOLVER_FAILURE, str(e), path))
            case Ok(value):
                return Ok(value)
            case Error(error):
                return Error(error)

    async def within_deadline(self, call: Callable[[], Awaitable[object]]) -> object:
        if self.deadline is None:
            return await call()
        remaining = self.deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            raise DeadlineExceeded("execution deadline exceeded before resolver started")
        try:
            return await asyncio.wait_for(call(), remaining)
        except TimeoutError as e:
            raise DeadlineExceeded("execution deadline exceeded") from e

    def check_shape(
        self,
        fd: FieldDefinition,
        node: SelectionNode,
        path: Path,
    ) -> FieldError | None:
        """Object fields need a sub-selection, scalar fields must not have one."""
        named = fd.type.named
        if self.schema.is_object_type(named) and not node.selections:
            return FieldError(
                FieldErrorKind.SHAPE_MISMATCH,
                f"field {fd.name!r} of type {fd.type} must have a selection of subfields",
                path,
            )
        if not self.schema.is_object_type(named) and node.selections:
            return FieldError(
                FieldErrorKind.SHAPE_MISMATCH,
                f"field {fd.name!r} of scalar type {fd.type} cannot have a selection of subfields",
                path,
            )
        return None

    async def complete(
        self,
        ref: TypeRef,
        value: object,
        node: SelectionNode,
        path: Path,
    ) -> _Outcome:
        """Turn a resolved value into a ResultValue for `ref`."""
        if value is None:
            if ref.nullable:
                return None, ()
            return _failed(
                FieldErrorKind.NULL_VIOLATION,
                f"non-null type {ref} resolved to null",
                path,
            )

        if ref.of_type is not None:
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                return _failed(
                    FieldErrorKind.SHAPE_MISMATCH,
                    f"expected an iterable for {ref}, got {type(value).__name__}",
                    path,
                )
            item_type = ref.of_type
            outcomes = await self.all([
                (
                    (*path, index),
                    lambda index=index, item=item: self.complete(item_type, item, node, (*path, index)),
                )
                for index, item in enumerate(value)
            ])
            items = [item for item, _ in outcomes]
            return items, tuple(e for _, item_errors in outcomes for e in item_errors)

        named = ref.named
        if self.schema.is_object_type(named):
            return await self.resolve_object(named, value, node.selections, path)

        scalar = self.schema.scalar(named)
        if scalar is None:
            return _failed(
                FieldErrorKind.SHAPE_MISMATCH,
                f"type {named!r} is neither an object type nor a scalar",
                path,
            )
        try:
            return scalar.serialize(value), ()
        except Exception as e:
            # Scalar serializers are user code, like resolvers
            return _failed(FieldErrorKind.SHAPE_MISMATCH, _describe(e), path)


# ═══════════════════════════════════════════════════════════════════════════════
# Executor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Executor:
    """
    Compiled executor: run many times, concurrently.

    Holds no per-execution state.
    """

    schema: Schema
    settings: Settings = Settings()
    probe: ExecutionProbe = field(default_factory=DefaultExecutionProbe)

    async def run(
        self,
        selection: SelectionNode | Sequence[SelectionNode],
        root_value: object = None,
    ) -> ExecutionResult:
        """
        Resolve `selection` against the query type.

        Never raises for field-level failures; cancellation propagates.
        """
        nodes = (selection,) if isinstance(selection, SelectionNode) else tuple(selection)
        loop = asyncio.get_running_loop()
        settings = self.settings

        execution = _Execution(
            schema=self.schema,
            probe=self.probe,
            concurrent=settings.parallel,
            deadline=(
                loop.time() + settings.timeout.total_seconds()
                if settings.timeout is not None
                else None
            ),
            limit=(
                asyncio.Semaphore(settings.max_concurrent)
                if settings.max_concurrent is not None
                else None
            ),
        )

        self.probe.execution_started(len(nodes))
        data, errors = await execution.resolve_object(
            self.schema.query_type, root_value, nodes, ()
        )
        for error in errors:
            self.probe.field_failed(error)
        self.probe.execution_finished(len(errors))

        return ExecutionResult(data=data, errors=errors)

    def __call__(
        self,
        selection: SelectionNode | Sequence[SelectionNode],
        root_value: object = None,
    ) -> LazyCoroResult[ExecutionResult, NoError]:
        """Execute lazily (returns awaitable)."""
        async def inner() -> Result[ExecutionResult, NoError]:
            return Ok(await self.run(selection, root_value))
        return LazyCoroResult(inner)


@dataclass(slots=True, frozen=True)
class ExecutorBuilder:
    """
    Fluent executor builder.

    Example:
        run = (
            Q.executor(schema)
            .policy(Q.policy.parallel_max(8))
            .policy(Q.policy.timeout(2.0))
            .build()
        )
    """

    _schema: Schema
    _policies: tuple[Policy, ...] = ()
    _probe: ExecutionProbe | None = None

    def policy(self, p: Policy) -> ExecutorBuilder:
        """Add execution policy. Later policies override earlier ones."""
        return ExecutorBuilder(
            _schema=self._schema,
            _policies=(*self._policies, p),
            _probe=self._probe,
        )

    def probe(self, p: ExecutionProbe) -> ExecutorBuilder:
        """Replace the default structlog probe."""
        return ExecutorBuilder(
            _schema=self._schema,
            _policies=self._policies,
            _probe=p,
        )

    def build(self) -> Executor:
        settings = Settings()
        for p in self._policies:
            settings = settings.apply(p)
        return Executor(
            schema=self._schema,
            settings=settings,
            probe=self._probe if self._probe is not None else DefaultExecutionProbe(),
        )


def executor(schema: Schema) -> ExecutorBuilder:
    """Create executor builder: executor(schema).policy(...).build()"""
    return ExecutorBuilder(_schema=schema)


async def execute(
    schema: Schema,
    selection: SelectionNode | Sequence[SelectionNode],
    root_value: object = None,
) -> ExecutionResult:
    """
    One-shot execution with default settings.

    Example:
        result = await Q.execute(schema, Q.selection("bookById", "id", id="book-1"))
    """
    return await executor(schema).build().run(selection, root_value)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ExecutionResult",
    "DeadlineExceeded",
    "Executor",
    "ExecutorBuilder",
    "executor",
    "execute",
)
