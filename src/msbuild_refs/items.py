"""Conversions between plain path strings and MSBuild task items."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class TaskItem:
    """A task item identified by its item spec."""

    item_spec: str

    def __str__(self) -> str:
        return self.item_spec


def as_task_items(items: Iterable[str]) -> list[TaskItem]:
    """Wrap each string as a task item."""
    return [TaskItem(s) for s in items]


def as_strings(items: Iterable[TaskItem]) -> list[str]:
    """Item specs of a collection of task items."""
    return [item.item_spec for item in items]
