"""
Statement to JSON-LD conversion.

Statements are handed to PyLD as an RDF dataset and converted with
``from_rdf`` using its default options: one node per subject, grouped
by graph, ``rdf:type`` folded into ``@type``, plain strings left untyped
and well-formed RDF lists folded into ``@list``.
"""
from typing import Any, Iterable
from pyld import jsonld
from ..models import Statement, Term
from ..vocab import RDF_LANG_STRING, XSD_STRING

DEFAULT_GRAPH = "@default"


def _node_id(term: Term) -> str:
    if term.kind == "blank":
        return term.value if term.value.startswith("_:") else f"_:{term.value}"
    return term.value


def to_rdf_term(term: Term) -> dict[str, str]:
    """Render a term in PyLD's dataset form."""
    if term.kind == "literal":
        rdf_term = {"type": "literal", "value": term.value}
        if term.language:
            rdf_term["datatype"] = RDF_LANG_STRING
            rdf_term["language"] = term.language
        else:
            rdf_term["datatype"] = term.datatype or XSD_STRING
        return rdf_term
    return {
        "type": "blank node" if term.kind == "blank" else "IRI",
        "value": _node_id(term),
    }


def to_dataset(statements: Iterable[Statement]) -> dict[str, list[dict]]:
    """Group statements into a PyLD dataset keyed by graph name."""
    dataset: dict[str, list[dict]] = {DEFAULT_GRAPH: []}
    for st in statements:
        graph = _node_id(st.graph) if st.graph else DEFAULT_GRAPH
        dataset.setdefault(graph, []).append({
            "subject": to_rdf_term(st.subject),
            "predicate": to_rdf_term(st.predicate),
            "object": to_rdf_term(st.object),
        })
    return dataset


def from_statements(statements: Iterable[Statement]) -> list[dict[str, Any]]:
    """
    Convert statements to a list of expanded JSON-LD node objects.

    Statements in a named graph are nested under a node for that
    graph's identifier.
    """
    return jsonld.from_rdf(to_dataset(statements), {"useRdfType": False, "useNativeTypes": False})
