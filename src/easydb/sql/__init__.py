"""Pure SQL-building helpers: templates, conditions, patterns, pages, ordering.

Nothing in this package performs I/O or holds state, so every function
is safe to share across connections and tasks.

Modules
-------
template        Dual-sigil template compiler (``#escaped#`` / ``$raw$``)
conditions      Field → operator spec to WHERE fragments
pattern         ``AND $field$`` condition-pattern assembler
pagination      Page request → offset/limit, row total → page total
ordering        ``"field DIRECTION"`` → ORDER BY
"""

from .conditions import ConditionClause, build_conditions, join_clauses, where_clause
from .ordering import format_order_by
from .pagination import Pagination, Paginator, page_count
from .pattern import assemble, pattern_slots
from .template import CompiledStatement, compile_template, placeholder_names, tokenize

__all__ = [
    # Templates
    "CompiledStatement",
    "compile_template",
    "placeholder_names",
    "tokenize",
    # Conditions
    "ConditionClause",
    "build_conditions",
    "join_clauses",
    "where_clause",
    # Patterns
    "assemble",
    "pattern_slots",
    # Pagination
    "Pagination",
    "Paginator",
    "page_count",
    # Ordering
    "format_order_by",
]
