"""Protocol definitions for the host contract.

The lifecycle hooks in ``blogcore.hooks`` only talk to the host through
these interfaces. ``blogcore.runtime.Site`` implements them in process;
tests use small fakes.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .nodes import Node, Page, QueryResult


@runtime_checkable
class Actions(Protocol):
    """Mutations a plugin may apply to the host's nodes and pages."""

    @abstractmethod
    def create_node(self, node: Node) -> None:
        """Add a node to the node store.

        Args:
            node: Node to add. Its id must be unique.
        """
        ...

    @abstractmethod
    def create_parent_child_link(self, parent: Node, child: Node) -> None:
        """Record ``child`` as a child of ``parent``."""
        ...

    @abstractmethod
    def create_page(self, page: Page) -> None:
        """Register a page, replacing any page at the same path."""
        ...

    @abstractmethod
    def delete_page(self, page: Page) -> None:
        """Remove a page from the registry."""
        ...


@runtime_checkable
class Reporter(Protocol):
    """Progress and error reporting."""

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def warn(self, message: str) -> None: ...

    @abstractmethod
    def panic(self, errors: Any) -> None:
        """Abort the build with an error. Never returns."""
        ...


@runtime_checkable
class HostAPI(Protocol):
    """Everything a hook receives from the host.

    Attributes:
        actions: Node and page mutations.
        reporter: Progress and error reporting.
        program_directory: Root directory of the site project.
    """

    actions: Actions
    reporter: Reporter
    program_directory: Path

    @abstractmethod
    def get_node(self, node_id: str | None) -> Node | None:
        """Return the node with ``node_id``, or None."""
        ...

    @abstractmethod
    def create_node_id(self, seed: str) -> str:
        """Return a deterministic node id for ``seed``."""
        ...

    @abstractmethod
    def query(
        self,
        node_type: str,
        sort: tuple[str, ...] = (),
        order: str = "DESC",
        limit: int | None = None,
    ) -> QueryResult:
        """Query nodes of one type.

        Args:
            node_type: Type of the nodes to return.
            sort: Field names to sort by, in priority order.
            order: ``ASC`` or ``DESC``.
            limit: Maximum number of nodes, or None for all.

        Returns:
            QueryResult whose ``data["nodes"]`` lists the matching nodes.
        """
        ...
