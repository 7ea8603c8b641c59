"""
Fluent query builder for one remote database.

Accumulates filters, relation filters, sorts, pagination and relation
includes, compiles them to Notion query JSON, executes the query and decodes
the results.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Set, Type, TypeVar, Union

from pydantic import BaseModel

from notion_orm.config import NotionOrmConfig
from notion_orm.core.errors import BuilderConsumedError, MappingError, RemoteError
from notion_orm.core.interfaces import IRemoteClient
from notion_orm.core.property_types import NotionPropertyType
from notion_orm.execution.result_formatter import ResultFormatter
from notion_orm.query.filter_translator import (
    AnyFilter,
    FilterCondition,
    NotionFilterTranslator,
    RelationFilter,
    SortCondition,
)
from notion_orm.query.relation_cache import RelationCache

logger = logging.getLogger(__name__)

# Largest page_size the Notion query endpoint accepts
MAX_PAGE_SIZE = 100

T = TypeVar("T", bound=BaseModel)

FILTER_OPERATORS = (
    "equals",
    "contains",
    "startsWith",
    "endsWith",
    "before",
    "after",
    "on_or_before",
    "on_or_after",
    "is_empty",
    "is_not_empty",
)


class QueryBuilder(Generic[T]):
    """
    Chainable query definition bound to one remote database.

    Every chaining method maps the given property key through
    ``property_mappings`` and returns the builder. A builder is single use:
    after ``execute()`` any further chaining or execution raises
    ``BuilderConsumedError``.

    Example:
        tasks = await (
            QueryBuilder(client, "db1", "Task", property_mappings={"done": "Done"})
            .where("done", "equals", True)
            .order_by("createdTime", "descending")
            .limit(10)
            .execute()
        )
    """

    def __init__(
        self,
        remote_client: Optional[IRemoteClient],
        database_id: str,
        model_name: str,
        relation_mappings: Optional[Dict[str, str]] = None,
        property_mappings: Optional[Dict[str, str]] = None,
        property_types: Optional[Dict[str, NotionPropertyType]] = None,
        result_model: Optional[Type[T]] = None,
        config: Optional[NotionOrmConfig] = None,
    ):
        """
        Initialize query builder.

        Args:
            remote_client: Client used to query databases and retrieve pages; may be
                None for a builder that is only compiled with build_query()
            database_id: Target remote database id
            model_name: Model name, used in diagnostics
            relation_mappings: Relation field name -> related database id
            property_mappings: Local field name -> remote property name
            property_types: Local field name -> property type, overrides name guessing
            result_model: Optional pydantic class the decoded rows are validated into
            config: Runtime configuration (cache TTL, debug tracing)
        """
        self.remote_client = remote_client
        self.database_id = database_id
        self.model_name = model_name
        self.relation_mappings = relation_mappings or {}
        self.property_mappings = property_mappings or {}
        self.property_types = property_types or {}
        self.result_model = result_model
        self.config = config or NotionOrmConfig()

        self._filters: List[AnyFilter] = []
        self._sorts: List[SortCondition] = []
        self._page_size: Optional[int] = None
        self._start_cursor: Optional[str] = None
        self._included_relations: Set[str] = set()
        self._executed = False

        self._translator = NotionFilterTranslator(self.relation_mappings, self.property_types)
        self._formatter = ResultFormatter()
        self._relation_cache = RelationCache(ttl=self.config.relation_cache_ttl)

        self._trace(f"Query builder initialized: model={model_name}, database={database_id}")

    def where(self, property: str, operator: str, value: Any = None) -> "QueryBuilder[T]":
        """
        Add a filter condition.

        Args:
            property: Local field name or remote property name
            operator: One of FILTER_OPERATORS; others fall back to equals
            value: Comparison value, ignored for is_empty / is_not_empty
        """
        self._ensure_open()
        mapped = self._map_property(property)
        if operator in ("is_empty", "is_not_empty"):
            value = None
        self._trace(f"Filter added: field={property}, property={mapped}, operator={operator}, value={value!r}")
        self._filters.append(
            FilterCondition(field=property, property=mapped, operator=operator, value=value)
        )
        return self

    def where_relation(
        self,
        relation_property: str,
        configure: Callable[["QueryBuilder"], Optional["QueryBuilder"]],
    ) -> "QueryBuilder[T]":
        """
        Filter on a relation property through a sub-query on the related database.

        Only the first condition of the sub-query is used; extra conditions are
        logged and ignored.

        Args:
            relation_property: Relation field; must have an entry in relation_mappings
            configure: Callback receiving the sub-builder and adding conditions

        Raises:
            MappingError: No related database id, or the sub-query has no condition
        """
        self._ensure_open()
        mapped = self._map_property(relation_property)
        related_database_id = self.relation_mappings.get(relation_property) or self.relation_mappings.get(mapped)
        if not related_database_id:
            raise MappingError(
                f"No related database id configured for relation '{relation_property}' "
                f"on model {self.model_name}"
            )

        sub_builder: QueryBuilder = QueryBuilder(
            self.remote_client,
            related_database_id,
            relation_property,
            config=self.config,
        )
        configured = configure(sub_builder)
        if configured is not None:
            sub_builder = configured

        sub_filters = sub_builder.get_filters()
        if not sub_filters:
            raise MappingError(
                f"Relation filter on '{relation_property}' must have at least one condition"
            )
        if len(sub_filters) > 1:
            logger.warning(
                f"Relation filter on '{relation_property}' uses only its first condition; "
                f"{len(sub_filters) - 1} more ignored"
            )

        first = sub_filters[0]
        self._trace(f"Relation filter added: {mapped}")
        self._filters.append(RelationFilter(property=mapped, operator=first.operator, value=first.value))
        return self

    def include(self, relation_property: str) -> "QueryBuilder[T]":
        """Resolve this relation property into full related records after execute()."""
        self._ensure_open()
        mapped = self._map_property(relation_property)
        self._trace(f"Relation included: {mapped}")
        self._included_relations.add(mapped)
        return self

    def order_by(self, property: str, direction: str = "ascending") -> "QueryBuilder[T]":
        """Add a sort condition."""
        self._ensure_open()
        if direction not in ("ascending", "descending"):
            raise ValueError(f"Invalid sort direction: {direction}")
        mapped = self._map_property(property)
        self._trace(f"Sort added: property={mapped}, direction={direction}")
        self._sorts.append(SortCondition(field=property, property=mapped, direction=direction))
        return self

    def limit(self, size: int) -> "QueryBuilder[T]":
        """Set the page size."""
        self._ensure_open()
        if not 1 <= size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}, got {size}")
        self._page_size = size
        return self

    def after(self, cursor: str) -> "QueryBuilder[T]":
        """Continue from a cursor returned by a previous query."""
        self._ensure_open()
        self._start_cursor = cursor
        return self

    def get_filters(self) -> List[AnyFilter]:
        return list(self._filters)

    @property
    def included_relations(self) -> Set[str]:
        return set(self._included_relations)

    def build_query(self) -> Dict[str, Any]:
        """
        Compile the accumulated conditions to Notion query JSON.

        Returns:
            ``{"database_id", "filter"?, "sorts"?, "page_size"?, "start_cursor"?}``
        """
        query: Dict[str, Any] = {"database_id": self.database_id}

        compiled_filter = self._translator.translate_filters(self._filters)
        if compiled_filter is not None:
            query["filter"] = compiled_filter
        if self._sorts:
            query["sorts"] = [self._translator.translate_sort(s) for s in self._sorts]
        if self._page_size:
            query["page_size"] = self._page_size
        if self._start_cursor:
            query["start_cursor"] = self._start_cursor
        return query

    async def execute(self) -> List[Union[T, Dict[str, Any]]]:
        """
        Run the query, decode the results and resolve included relations.

        Returns:
            Decoded rows in result order; ``result_model`` instances when one was given

        Raises:
            BuilderConsumedError: The builder was already executed
            MappingError: No remote client was configured
            RemoteError: The remote query or a relation fetch failed
        """
        self._ensure_open()
        if self.remote_client is None:
            raise MappingError(f"No remote client configured for {self.model_name}; cannot execute")
        self._executed = True
        query = self.build_query()
        self._trace(f"Executing query for {self.model_name}: {json.dumps(query, ensure_ascii=False)}")

        try:
            response = await self.remote_client.query_database(query)
            results = self._formatter.format_records(response.get("results", []))
            self._trace(f"{len(results)} results returned")

            if self._included_relations:
                await asyncio.gather(*(self.load_relations(r) for r in results))
        except RemoteError as e:
            logger.error(f"Query for {self.model_name} failed: {e}", extra={"model": self.model_name})
            if e.code == "validation_error":
                logger.error(
                    f"Validation error details for {self.model_name}: {e}; query={json.dumps(query, ensure_ascii=False)}",
                    extra={"model": self.model_name},
                )
            raise

        if self.result_model is not None:
            return [self.result_model.model_validate(r) for r in results]
        return results

    async def load_relations(self, result: Dict[str, Any]) -> None:
        """Replace included relation stubs on one decoded row with full related records."""
        await asyncio.gather(
            *(
                self._load_relation(result, name)
                for name in self._included_relations
                if result.get(name)
            )
        )

    async def _load_relation(self, result: Dict[str, Any], name: str) -> None:
        value = result[name]
        is_list = isinstance(value, list)
        ids = [item["id"] for item in value] if is_list else [value["id"]]

        related = await asyncio.gather(*(self._get_relation_data(record_id) for record_id in ids))
        result[name] = list(related) if is_list else related[0]

    async def _get_relation_data(self, record_id: str) -> Dict[str, Any]:
        cached = self._relation_cache.get(record_id)
        if cached is not None:
            self._trace(f"Relation cache hit: {record_id}")
            return cached

        try:
            page = await self.remote_client.retrieve_page(record_id)
        except RemoteError as e:
            logger.error(f"Failed to load related record {record_id}: {e}", extra={"model": self.model_name})
            raise
        decoded = self._formatter.format_record(page)
        self._relation_cache.set(record_id, decoded)
        return decoded

    def _map_property(self, property: str) -> str:
        return self.property_mappings.get(property, property)

    def _ensure_open(self) -> None:
        if self._executed:
            raise BuilderConsumedError(
                f"Query builder for {self.model_name} was already executed; create a new one"
            )

    def _trace(self, message: str) -> None:
        if self.config.debug:
            logger.debug(message, extra={"model": self.model_name})
