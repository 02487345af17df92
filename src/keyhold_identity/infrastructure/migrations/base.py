"""Migration step and result types."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncConnection

StepRunner = Callable[[AsyncConnection], Awaitable[None]]


@dataclass(frozen=True)
class MigrationStep:
    """A named schema change.

    ``run`` receives the connection of the transaction that also records
    the step, so it must not commit on its own.
    """

    name: str
    run: StepRunner = field(compare=False)


@dataclass(frozen=True)
class MigrationRecord:
    id: int
    name: str
    executed_at: datetime


@dataclass(frozen=True)
class MigrationReport:
    """Outcome of ``SchemaMigrator.apply``.

    ``raced`` lists steps another process recorded first; their own changes
    were rolled back.
    """

    applied: tuple[str, ...] = ()
    raced: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.applied)
