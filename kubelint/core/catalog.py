"""Rule catalog: the table of object schemas and cross-reference rules.

The catalog is built once at startup, frozen, and then passed to every
pipeline stage. Lookups are dictionary based. A frozen catalog can be
extended only through ``derive()``, which returns an unfrozen copy.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from kubelint.core.errors import CatalogFrozen, DuplicateSchema
from kubelint.core.rules import Struct
from kubelint.core.schema.check import Check

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class ObjectKind:
    """Identity of a document type.

    Attributes:
        group: API group, "" for the core group
        version: API version within the group (e.g., "v1")
        kind: Kind name (e.g., "Deployment")
    """

    group: str
    version: str
    kind: str

    @classmethod
    def parse(cls, api_version: str, kind: str) -> "ObjectKind":
        """Build an ObjectKind from an ``apiVersion`` string.

        Example:
            >>> ObjectKind.parse("apps/v1", "Deployment")
            ObjectKind(group='apps', version='v1', kind='Deployment')
            >>> ObjectKind.parse("v1", "Pod").group
            ''
        """
        group, _, version = api_version.rpartition("/")
        return cls(group, version, kind)

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return f"{self.api_version} {self.kind}"


@dataclass(frozen=True)
class ObjectSchema:
    """Rules for one ObjectKind.

    Attributes:
        kind: The ObjectKind this schema describes
        body: Struct describing the whole document (apiVersion, kind, metadata, ...)
        cross_refs: Cross-reference rules that inspect documents of this kind
        namespaced: Whether objects of this kind live in a namespace
        deprecated: Deprecation note; None when the apiVersion is current
    """

    kind: ObjectKind
    body: Struct
    cross_refs: Tuple[Check, ...] = ()
    namespaced: bool = True
    deprecated: Optional[str] = None


class RuleCatalog:
    """Registry of ObjectSchemas keyed by ObjectKind.

    Example:
        >>> catalog = RuleCatalog()
        >>> catalog.register(schema)
        >>> catalog.freeze()
        >>> catalog.lookup(ObjectKind.parse("v1", "Pod"))
    """

    def __init__(self) -> None:
        self._schemas: Dict[ObjectKind, ObjectSchema] = {}
        self._by_kind: Dict[str, List[ObjectKind]] = {}
        self._frozen = False

    def register(self, schema: ObjectSchema) -> None:
        """Register a schema.

        Args:
            schema: Schema to add

        Raises:
            DuplicateSchema: If a schema for the same ObjectKind exists
            CatalogFrozen: If the catalog has been frozen
        """
        if self._frozen:
            raise CatalogFrozen(f"Cannot register {schema.kind}: catalog is frozen")
        if schema.kind in self._schemas:
            raise DuplicateSchema(schema.kind)
        self._schemas[schema.kind] = schema
        self._by_kind.setdefault(schema.kind.kind, []).append(schema.kind)
        logger.debug(f"Registered schema for {schema.kind}")

    def freeze(self) -> "RuleCatalog":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def derive(self) -> "RuleCatalog":
        """Return an unfrozen copy holding the same schemas."""
        copy = RuleCatalog()
        for schema in self._schemas.values():
            copy.register(schema)
        return copy

    def lookup(self, kind: ObjectKind) -> Optional[ObjectSchema]:
        return self._schemas.get(kind)

    def versions_of(self, kind_name: str) -> List[str]:
        """apiVersions registered for a kind name, in registration order."""
        return [k.api_version for k in self._by_kind.get(kind_name, [])]

    def cross_ref_rules(self) -> List[Check]:
        """Distinct cross-reference rules, ordered by stage then registration."""
        seen = set()
        rules = []
        for schema in self._schemas.values():
            for rule in schema.cross_refs:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    rules.append(rule)
        return sorted(rules, key=lambda rule: rule.stage)

    def __iter__(self) -> Iterator[ObjectSchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)

    def __contains__(self, kind: ObjectKind) -> bool:
        return kind in self._schemas
