"""IRIs used in the hypermedia documents."""

TREE = "https://w3id.org/tree#"
TREE_VIEW = TREE + "view"
TREE_MEMBER = TREE + "member"
TREE_RELATION = TREE + "relation"
TREE_NODE = TREE + "node"
TREE_PATH = TREE + "path"
TREE_VALUE = TREE + "value"
TREE_REMAINING_ITEMS = TREE + "remainingItems"

SUBSTRING_RELATION = TREE + "SubstringRelation"
PREFIX_RELATION = TREE + "PrefixRelation"
EQUAL_TO_RELATION = TREE + "EqualToRelation"
GREATER_OR_EQUAL_RELATION = TREE + "GreaterOrEqualThanRelation"
GEOSPATIALLY_CONTAINS_RELATION = TREE + "GeospatiallyContainsRelation"

XSD = "http://www.w3.org/2001/XMLSchema#"
XSD_STRING = XSD + "string"
XSD_DATETIME = XSD + "dateTime"

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
RDF_LANG_STRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"
RDF_FIRST = "http://www.w3.org/1999/02/22-rdf-syntax-ns#first"
RDF_REST = "http://www.w3.org/1999/02/22-rdf-syntax-ns#rest"
RDF_NIL = "http://www.w3.org/1999/02/22-rdf-syntax-ns#nil"
