"""Query building and translation components."""

from notion_orm.query.builder import QueryBuilder, FILTER_OPERATORS
from notion_orm.query.filter_translator import (
    NotionFilterTranslator,
    FilterCondition,
    RelationFilter,
    SortCondition,
    infer_property_type,
    looks_like_relation,
)
from notion_orm.query.relation_cache import RelationCache

__all__ = [
    "QueryBuilder",
    "FILTER_OPERATORS",
    "NotionFilterTranslator",
    "FilterCondition",
    "RelationFilter",
    "SortCondition",
    "infer_property_type",
    "looks_like_relation",
    "RelationCache",
]
