"""
yaml_handler.py - Position-aware YAML loading

Workflow documents are loaded with a SafeLoader subclass that records where
each mapping and each mapping value starts, so findings can point at the
offending line.
"""

from typing import Any, Dict, List, TextIO, cast

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode

LINE_KEY = "__line__"
COLUMN_KEY = "__column__"
VALUE_LINES_KEY = "__value_lines__"

POSITION_KEYS = (LINE_KEY, COLUMN_KEY, VALUE_LINES_KEY)


class LineColumnLoader(yaml.SafeLoader):
    """YAML loader that tracks 1-based line and column information"""

    def __init__(self, stream: TextIO | str | bytes) -> None:
        super().__init__(stream)

    def compose_node(self, parent: Any, index: Any) -> Node:
        node = cast(Node, super().compose_node(parent, index))
        setattr(node, "__line__", node.start_mark.line + 1)
        setattr(node, "__column__", node.start_mark.column + 1)
        return node

    def construct_mapping(self, node: MappingNode, deep: bool = False) -> Dict[Any, Any]:
        mapping = cast(Dict[Any, Any], super().construct_mapping(node, deep=deep))

        value_lines: Dict[str, int] = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, ScalarNode):
                value_lines[key_node.value] = value_node.start_mark.line + 1

        mapping[LINE_KEY] = getattr(node, "__line__", None)
        mapping[COLUMN_KEY] = getattr(node, "__column__", None)
        mapping[VALUE_LINES_KEY] = value_lines
        return mapping


# PyYAML resolves plain 'on', 'off', 'yes' and 'no' to booleans (YAML 1.1),
# which would turn the workflow 'on:' key into True. Drop the implicit bool
# resolver so these stay strings.
for first_char, resolvers in list(LineColumnLoader.yaml_implicit_resolvers.items()):
    LineColumnLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"
    ]


def load_yaml_with_positions(content: str | bytes) -> Any:
    """
    Load YAML content and preserve line/column positions

    Args:
        content: YAML content as text or raw bytes

    Returns:
        Parsed document; every mapping carries position keys

    Raises:
        yaml.YAMLError: If YAML parsing fails
    """
    return yaml.load(content, Loader=LineColumnLoader)


def mapping_items(mapping: Dict[Any, Any]) -> List[Any]:
    """Return (key, value) pairs of a loaded mapping, skipping position keys"""
    return [(k, v) for k, v in mapping.items() if k not in POSITION_KEYS]


def value_line(mapping: Dict[Any, Any], key: str) -> Any:
    """Line on which the value for ``key`` starts, if known"""
    return mapping.get(VALUE_LINES_KEY, {}).get(key)
