"""
Snapshot Schema Registry - table order and deferred edges for transfers.

Declares every table that takes part in a snapshot, the import pass each
table is written in, and the deferred edges that break circular foreign
keys. The registry is pure data: it never touches a store.

Import passes:
    1. Tables with no dependency on any other registered table
    2. Tables on the referencing side of a deferred edge, written with the
       deferred field forced to None
    3. Tables on the referenced side of a deferred edge
    4. Remaining join/child tables, in declared order

After pass 4 the patch queue collected in pass 2 restores every deferred
field that was non-null in the source.

Usage:
    from zenpire_inventory.services.snapshot_schema import DEFAULT_REGISTRY

    rows, patches = DEFAULT_REGISTRY.defer_rows("ingredient", tables["ingredient"])
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from zenpire_inventory.utils.constants import BINARY_PAYLOAD_FIELDS

Record = Dict[str, Any]

PASS_INDEPENDENT = 1
PASS_DEFERRED = 2
PASS_REFERENCED = 3
PASS_DEPENDENT = 4

IMPORT_PASSES = (PASS_INDEPENDENT, PASS_DEFERRED, PASS_REFERENCED, PASS_DEPENDENT)


# ============================================================================
# Data Classes
# ============================================================================


@dataclass(frozen=True)
class TableSpec:
    """A transferable table and the pass it is imported in."""

    name: str
    import_pass: int
    binary_fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DeferredEdge:
    """
    A nullable reference that is written as None and patched later.

    Attributes:
        table: Referencing table (pass 2)
        field: Nullable column on table holding the reference
        references: Referenced table (pass 3)
    """

    table: str
    field: str
    references: str


@dataclass(frozen=True)
class PendingPatch:
    """One queued restore of a deferred field."""

    table: str
    record_id: Any
    field: str
    value: Any


@dataclass(frozen=True)
class SchemaRegistry:
    """
    Ordered declaration of transferable tables and deferred edges.

    Raises:
        ValueError: If the declaration is inconsistent (duplicate tables,
            unknown pass, passes out of order, edge on the wrong pass)
    """

    tables: Tuple[TableSpec, ...]
    deferred_edges: Tuple[DeferredEdge, ...] = field(default_factory=tuple)

    def __post_init__(self):
        errors = _validate_declaration(self.tables, self.deferred_edges)
        if errors:
            raise ValueError("Invalid schema registry: " + "; ".join(errors))

    @property
    def table_names(self) -> List[str]:
        """All table names in declared order."""
        return [spec.name for spec in self.tables]

    def get(self, name: str) -> TableSpec:
        """Look up a table spec by name."""
        for spec in self.tables:
            if spec.name == name:
                return spec
        raise KeyError(f"Table '{name}' is not registered")

    def tables_for_pass(self, import_pass: int) -> List[str]:
        """Table names written in the given pass, in declared order."""
        return [spec.name for spec in self.tables if spec.import_pass == import_pass]

    def edges_for(self, table: str) -> List[DeferredEdge]:
        """Deferred edges whose referencing side is table."""
        return [edge for edge in self.deferred_edges if edge.table == table]

    def binary_fields_for(self, table: str) -> Tuple[str, ...]:
        """Columns stripped from table by the plain export."""
        return self.get(table).binary_fields

    def defer_rows(
        self, table: str, rows: Sequence[Mapping[str, Any]]
    ) -> Tuple[List[Record], List[PendingPatch]]:
        """
        Null out deferred fields and collect the values to patch back.

        Args:
            table: Table the rows belong to
            rows: Source records (not modified)

        Returns:
            Tuple of (copies with every present deferred field set to None,
            patches for every record whose original value was non-null)
        """
        edges = self.edges_for(table)
        deferred: List[Record] = []
        patches: List[PendingPatch] = []

        for row in rows:
            copy = dict(row)
            for edge in edges:
                if edge.field not in copy:
                    continue
                value = copy[edge.field]
                if value is not None:
                    patches.append(PendingPatch(table, row.get("id"), edge.field, value))
                copy[edge.field] = None
            deferred.append(copy)

        return deferred, patches

    def strip_binary(self, table: str, record: Mapping[str, Any]) -> Record:
        """Copy a record with the table's binary payload fields set to None."""
        stripped = dict(record)
        for name in self.binary_fields_for(table):
            stripped[name] = None
        return stripped


def _validate_declaration(
    tables: Sequence[TableSpec], edges: Sequence[DeferredEdge]
) -> List[str]:
    errors = []
    passes = {}
    previous_pass = 0

    for spec in tables:
        if spec.name in passes:
            errors.append(f"duplicate table '{spec.name}'")
        if spec.import_pass not in IMPORT_PASSES:
            errors.append(f"table '{spec.name}' has unknown pass {spec.import_pass}")
        elif spec.import_pass < previous_pass:
            errors.append(f"table '{spec.name}' is declared after a later pass")
        else:
            previous_pass = spec.import_pass
        passes[spec.name] = spec.import_pass

    for edge in edges:
        if passes.get(edge.table) != PASS_DEFERRED:
            errors.append(f"deferred edge table '{edge.table}' must be in pass {PASS_DEFERRED}")
        if passes.get(edge.references) != PASS_REFERENCED:
            errors.append(
                f"deferred edge target '{edge.references}' must be in pass {PASS_REFERENCED}"
            )

    return errors


# ============================================================================
# Default Registry
# ============================================================================

# Declared in import-safe order. supplier precedes supplier_offer, which
# precedes supplier_offer_price and ingredient_supplier_offer.
DEFAULT_REGISTRY = SchemaRegistry(
    tables=(
        TableSpec("unit", PASS_INDEPENDENT),
        TableSpec("allergen", PASS_INDEPENDENT),
        TableSpec("ingredient", PASS_DEFERRED, BINARY_PAYLOAD_FIELDS),
        TableSpec("recipe", PASS_REFERENCED, BINARY_PAYLOAD_FIELDS),
        TableSpec("recipe_component", PASS_DEPENDENT),
        TableSpec("recipe_step", PASS_DEPENDENT),
        TableSpec("supplier", PASS_DEPENDENT),
        TableSpec("supplier_offer", PASS_DEPENDENT),
        TableSpec("supplier_offer_price", PASS_DEPENDENT),
        TableSpec("ingredient_supplier_offer", PASS_DEPENDENT),
        TableSpec("ingredient_stock", PASS_DEPENDENT),
    ),
    deferred_edges=(DeferredEdge("ingredient", "produced_by_recipe_id", "recipe"),),
)
