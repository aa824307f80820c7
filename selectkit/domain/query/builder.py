"""
SELECT Statement Builder

Assembles SELECT statements from structured clause fragments.

Clause bodies are caller-trusted raw SQL; the builder only decides which
keywords appear and in which order. Fragments are joined with single spaces:

    SELECT <columns|*> FROM <source>
        [WHERE ...] [GROUP BY ...] [HAVING ...] [ORDER BY ...]
        [LIMIT n [OFFSET m]]

Usage:
    builder = StatementBuilder()
    statement = builder.build(QuerySpec(source="users", limit=10))
    statement.sql         # "SELECT * FROM users LIMIT 10"
    statement.parameters  # ()
"""

from typing import List

from selectkit.shared.types.models import BuiltStatement, CountSpec, QuerySpec


class StatementBuilder:
    """
    Turns a QuerySpec into SQL text plus its parameters.

    Pure and total: malformed clause text is only detected later, when the
    engine prepares the statement.
    """

    def build(self, spec: QuerySpec) -> BuiltStatement:
        """
        Build the SELECT statement described by `spec`.

        Args:
            spec: Query description

        Returns:
            BuiltStatement with the SQL text and the parameters, in order
        """
        fragments: List[str] = ["SELECT"]

        if spec.columns is not None:
            fragments.append(",".join(spec.columns))
        else:
            fragments.append("*")

        fragments.append("FROM")
        fragments.append(spec.source)

        if spec.where is not None:
            fragments.append("WHERE")
            fragments.append(spec.where)

        if spec.group_by is not None:
            fragments.append("GROUP BY")
            fragments.append(spec.group_by)

        # HAVING without GROUP BY is left for the engine to reject
        if spec.having is not None:
            fragments.append("HAVING")
            fragments.append(spec.having)

        if spec.order_by is not None:
            fragments.append("ORDER BY")
            fragments.append(spec.order_by)

        if spec.limit is not None:
            fragments.append("LIMIT")
            fragments.append(str(int(spec.limit)))

            if spec.offset is not None:
                fragments.append("OFFSET")
                fragments.append(str(int(spec.offset)))

        return BuiltStatement(sql=" ".join(fragments), parameters=spec.parameters)

    def build_count(self, spec: CountSpec) -> BuiltStatement:
        """Build the `SELECT count(...)` statement described by `spec`."""
        return self.build(count_query(spec))


def count_query(spec: CountSpec) -> QuerySpec:
    """
    Derive the QuerySpec that counts the rows described by `spec`.

    The derived query has a single `count(...)` column and no grouping,
    ordering or paging, so it always yields at most one row.
    """
    return QuerySpec(
        source=spec.source,
        columns=(spec.count_expression,),
        where=spec.where,
        parameters=spec.parameters,
    )
