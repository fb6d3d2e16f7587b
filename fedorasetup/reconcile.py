"""Check-then-recreate handling for named external resources.

Before a named resource is created, its existence is checked. An existing
resource is kept unless the user asks to delete and recreate it. There is no
locking; the tools are meant for a single interactive run at a time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from loguru import logger

from fedorasetup.console import BasePrompter, print_info, print_plain, print_success, print_warning
from fedorasetup.runner import CommandResult, StepResult


def _sentence(text: str) -> str:
    return text[:1].upper() + text[1:]


class ManagedResource(ABC):
    """A named resource that can be checked, deleted and created."""

    kind: str = "resource"
    # A failed delete aborts the step instead of being reported and ignored
    delete_failure_fatal: bool = True

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the resource is present."""

    @abstractmethod
    def delete(self) -> CommandResult:
        """Delete the resource."""

    @abstractmethod
    def create(self) -> CommandResult:
        """Create the resource."""

    def describe(self) -> list[str]:
        """Lines describing the existing resource, shown before asking."""
        return []

    def delete_hint(self) -> list[str]:
        """Lines shown when deleting failed."""
        return []

    @property
    def label(self) -> str:
        return f"{self.kind} '{self.name}'"


class ResourceReconciler:
    """Drive a :class:`ManagedResource` through exists/ask/delete/create."""

    def __init__(self, prompter: BasePrompter) -> None:
        self.prompter = prompter

    def reconcile(self, resource: ManagedResource) -> StepResult:
        if resource.exists():
            print_warning(f"{_sentence(resource.label)} already exists")
            description = resource.describe()
            if description:
                print_info("Current configuration:")
                for line in description:
                    print_plain(f"  {line}")

            if not self.prompter.confirm("Do you want to delete and recreate it?", default=False):
                print_success(f"Using existing {resource.kind}")
                return StepResult.success(f"Using existing {resource.label}")

            print_info(f"Deleting existing {resource.kind}...")
            deleted = resource.delete()
            if deleted.ok:
                print_success(f"Deleted existing {resource.kind}")
            elif resource.delete_failure_fatal:
                logger.debug(f"Delete of {resource.label} failed: {deleted.output}")
                return StepResult.fatal(f"Failed to delete {resource.label}", details=resource.delete_hint())
            else:
                print_warning(f"Could not delete {resource.label} (exit code {deleted.returncode}), continuing")

        created = resource.create()
        if not created.ok:
            details = [created.output] if created.output else []
            return StepResult.fatal(f"Failed to create {resource.label}", details=details)

        print_success(f"Created {resource.label}")
        return StepResult.success(f"Created {resource.label}", changed=True)
