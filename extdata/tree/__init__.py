"""Tree rendering - lazily expanded record hierarchies for the Ext JS tree widget."""

from extdata.tree.engine import Tree, TreeBuilder
from extdata.tree.node_ids import ROOT_NODE, NodeRef, decode_node_id, encode_node_id
from extdata.tree.schemas import NodeSpec

__all__ = [
    "ROOT_NODE",
    "NodeRef",
    "NodeSpec",
    "Tree",
    "TreeBuilder",
    "decode_node_id",
    "encode_node_id",
]
