"""
View services: name resolution, pagination, relations and document assembly.
"""

from .ldes import LdesViewService, Redirect, View
from .pager import EventPager, Page, PageCompletion
from .relations import Relation, RelationBuilder, RelationStrategy, strategy_for
from .resolver import FragmentationGate, NameResolver
from .views import ViewAssembler
from .jsonld import from_statements

__all__ = [
    "EventPager",
    "FragmentationGate",
    "LdesViewService",
    "NameResolver",
    "Page",
    "PageCompletion",
    "Redirect",
    "Relation",
    "RelationBuilder",
    "RelationStrategy",
    "View",
    "ViewAssembler",
    "from_statements",
    "strategy_for",
]
