"""Entity index: the hierarchy of documented namespaces, types and concepts."""

from .forest import ChildIndexResolver, Forest, SearchResults
from .loader import (
    ScriptDirectoryResolver,
    dump_index,
    load_index,
    load_index_file,
    parse_index_script,
    parse_nodes,
)
from .models import (
    ChildIndexRef,
    Crumb,
    EntityNode,
    EntityPath,
    GroupNode,
    MalformedIndexError,
    PageGroupNode,
    PageNode,
)

__all__ = [
    "ChildIndexRef",
    "ChildIndexResolver",
    "Crumb",
    "EntityNode",
    "EntityPath",
    "Forest",
    "GroupNode",
    "MalformedIndexError",
    "PageGroupNode",
    "PageNode",
    "ScriptDirectoryResolver",
    "SearchResults",
    "dump_index",
    "load_index",
    "load_index_file",
    "parse_index_script",
    "parse_nodes",
]
