"""Tests for specdoc.normalizer.classifier."""

from __future__ import annotations

from specdoc.models import SchemaNode
from specdoc.normalizer.classifier import classify, resolve_type


class TestClassify:
    def test_untyped_node_is_object(self) -> None:
        assert classify(SchemaNode()) == "object"

    def test_untyped_node_with_properties_is_object(self) -> None:
        node = SchemaNode(properties={"a": SchemaNode(type="string")})
        assert classify(node) == "object"

    def test_primitive(self) -> None:
        assert classify(SchemaNode(type="string")) == "string"
        assert classify(SchemaNode(type="boolean")) == "boolean"

    def test_format_overrides_type(self) -> None:
        assert classify(SchemaNode(type="string", format="date-time")) == "date-time"

    def test_array_of_primitive(self) -> None:
        node = SchemaNode(type="array", items=SchemaNode(type="string"))
        assert classify(node) == "array of string"

    def test_array_of_formatted_primitive(self) -> None:
        node = SchemaNode(type="array", items=SchemaNode(type="integer", format="int64"))
        assert classify(node) == "array of int64"

    def test_array_of_object(self) -> None:
        node = SchemaNode(type="array", items=SchemaNode(title="Pet", type="object"))
        assert classify(node) == "array of object"

    def test_array_of_untyped_item_is_array_of_object(self) -> None:
        node = SchemaNode(type="array", items=SchemaNode(title="Pet"))
        assert classify(node) == "array of object"


class TestResolveType:
    def test_kind_node_is_self_without_items(self) -> None:
        node = SchemaNode(type="string")
        kind_node, types = resolve_type(node)
        assert kind_node is node
        assert types == ["string"]

    def test_kind_node_is_items(self) -> None:
        item = SchemaNode(title="Pet", type="object")
        kind_node, types = resolve_type(SchemaNode(type="array", items=item))
        assert kind_node is item
        assert types == ["array", "object"]

    def test_nested_array(self) -> None:
        inner = SchemaNode(type="array", items=SchemaNode(type="string"))
        _, types = resolve_type(SchemaNode(type="array", items=inner))
        assert types == ["array", "array"]

    def test_non_array_with_items_keeps_outer_type(self) -> None:
        item = SchemaNode(title="Pet")
        kind_node, types = resolve_type(SchemaNode(type="object", items=item))
        assert kind_node is item
        assert types == ["object"]

    def test_force_map(self) -> None:
        _, types = resolve_type(SchemaNode(type="integer"), force_map=True)
        assert types == ["map", "integer"]

    def test_force_map_untyped(self) -> None:
        _, types = resolve_type(SchemaNode(), force_map=True)
        assert types == ["map", "object"]

    def test_force_map_with_format(self) -> None:
        _, types = resolve_type(SchemaNode(type="string", format="uuid"), force_map=True)
        assert types == ["map", "uuid"]

    def test_force_map_of_array_uses_items(self) -> None:
        node = SchemaNode(type="array", items=SchemaNode(type="string"))
        kind_node, types = resolve_type(node, force_map=True)
        assert kind_node is node.items
        assert types == ["array", "string"]
