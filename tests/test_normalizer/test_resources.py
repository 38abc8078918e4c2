"""Tests for specdoc.normalizer.resources -- resource resolver and property compiler."""

from __future__ import annotations

import pytest

from specdoc.exceptions import StructuralError
from specdoc.models import Method, SchemaNode
from specdoc.normalizer.resources import (
    ADDITIONAL_PROPERTIES_KEY,
    ResourceResolver,
    prepare_namespace,
    stringify_enum,
)


@pytest.fixture
def method() -> Method:
    return Method(id="create-pet", method="post", path="/pets", operation_name="post")


@pytest.fixture
def resolver(method: Method) -> ResourceResolver:
    return ResourceResolver(method)


def _pet(**properties: SchemaNode) -> SchemaNode:
    return SchemaNode(title="Pet", type="object", properties=properties)


# ---------------------------------------------------------------------------
# Top-level resolution
# ---------------------------------------------------------------------------


class TestResolve:
    def test_none_is_absent(self, resolver: ResourceResolver) -> None:
        assert resolver.resolve(None) is None

    def test_object_resource(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(
            title="Pet",
            type="object",
            required=["id", "name"],
            properties={
                "id": SchemaNode(type="integer"),
                "name": SchemaNode(type="string"),
                "tag": SchemaNode(type="string"),
            },
        )
        resource, example, is_array = resolver.resolve(node)

        assert resource.id == "pet"
        assert resource.title == "Pet"
        assert resource.type == ["object"]
        assert resource.fqns == []
        assert is_array is False
        assert example == {"id": "integer", "name": "string", "tag": "string"}
        assert resource.properties["id"].required is True
        assert resource.properties["name"].required is True
        assert resource.properties["tag"].required is False

    def test_description_falls_back_to_title(self, resolver: ResourceResolver) -> None:
        resource = resolver.resolve(_pet()).resource
        assert resource.description == "Pet"

    def test_own_description_kept(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(title="Pet", description="A pet in the store")
        assert resolver.resolve(node).resource.description == "A pet in the store"

    def test_supplied_name_beats_title(self, resolver: ResourceResolver) -> None:
        resource = resolver.resolve(SchemaNode(title="Animal"), name="Pet").resource
        assert resource.id == "pet"
        assert resource.title == "Pet"

    def test_missing_title_is_fatal(self, resolver: ResourceResolver) -> None:
        with pytest.raises(StructuralError) as exc_info:
            resolver.resolve(SchemaNode(type="object"))
        assert str(exc_info.value) == (
            "POST /pets references a model definition that does not have a title member."
        )

    def test_top_level_array(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(
            type="array",
            items=_pet(id=SchemaNode(type="integer")),
        )
        resource, example, is_array = resolver.resolve(node)
        assert is_array is True
        assert resource.id == "pet"
        assert resource.type == ["array", "object"]
        assert example == {"id": "integer"}

    def test_top_level_array_of_primitive(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(type="array", items=SchemaNode(type="string"))
        resource, example, is_array = resolver.resolve(node, name="Tags")
        assert resource.id == "tags"
        assert resource.type == ["array", "string"]
        assert example == {}
        assert is_array is True

    def test_declared_example_and_enum(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(title="Size", type="integer", enum=[1, 2, 3], example=2)
        resource = resolver.resolve(node).resource
        assert resource.example == "2"
        assert resource.enum == ["1", "2", "3"]

    def test_format_reported_as_type(self, resolver: ResourceResolver) -> None:
        node = _pet(born=SchemaNode(type="string", format="date-time"))
        resource, example, _ = resolver.resolve(node)
        assert resource.properties["born"].type == ["date-time"]
        assert example == {"born": "date-time"}


# ---------------------------------------------------------------------------
# Property compiler: skip rules
# ---------------------------------------------------------------------------


class TestSkipRules:
    def test_read_only_absent_in_request(self, resolver: ResourceResolver) -> None:
        node = _pet(
            id=SchemaNode(type="integer", read_only=True),
            name=SchemaNode(type="string"),
        )
        resource, example, _ = resolver.resolve(node, is_request=True)
        assert "id" not in resource.properties
        assert "id" not in example
        assert example == {"name": "string"}

    def test_read_only_present_in_response(self, resolver: ResourceResolver) -> None:
        node = _pet(id=SchemaNode(type="integer", read_only=True))
        resource, example, _ = resolver.resolve(node, is_request=False)
        assert resource.properties["id"].read_only is True
        assert example == {"id": "integer"}

    def test_required_read_only_still_skipped(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(
            title="Pet",
            required=["id"],
            properties={"id": SchemaNode(type="integer", read_only=True)},
        )
        resource, example, _ = resolver.resolve(node, is_request=True)
        assert resource.properties == {}
        assert example == {}

    def test_excluded_from_operation(self, resolver: ResourceResolver) -> None:
        node = _pet(
            id=SchemaNode(
                type="integer", extensions={"x-excludeFromOperations": ["post", "put"]}
            ),
            name=SchemaNode(type="string"),
        )
        resource, example, _ = resolver.resolve(node, is_request=True)
        assert list(resource.properties) == ["name"]
        assert example == {"name": "string"}

    def test_exclusion_ignored_in_response(self, resolver: ResourceResolver) -> None:
        node = _pet(
            id=SchemaNode(type="integer", extensions={"x-excludeFromOperations": ["post"]}),
        )
        resource, _, _ = resolver.resolve(node, is_request=False)
        assert "id" in resource.properties
        assert resource.properties["id"].exclude_from_operations == []

    def test_exclusion_for_other_operation(self) -> None:
        method = Method(id="update-pet", method="put", path="/pets", operation_name="put")
        node = _pet(id=SchemaNode(type="integer", extensions={"x-excludeFromOperations": ["post"]}))
        resource, _, _ = ResourceResolver(method).resolve(node, is_request=True)
        assert "id" in resource.properties


# ---------------------------------------------------------------------------
# Property compiler: example shapes
# ---------------------------------------------------------------------------


class TestExampleShapes:
    def test_nested_object(self, resolver: ResourceResolver) -> None:
        node = _pet(owner=SchemaNode(type="object", properties={"name": SchemaNode(type="string")}))
        resource, example, _ = resolver.resolve(node)
        assert example == {"owner": {"name": "string"}}
        assert resource.properties["owner"].type == ["object"]

    def test_array_of_primitive(self, resolver: ResourceResolver) -> None:
        node = _pet(tags=SchemaNode(type="array", items=SchemaNode(type="string")))
        resource, example, _ = resolver.resolve(node)
        assert example == {"tags": ["string"]}
        assert resource.properties["tags"].type == ["array", "string"]

    def test_array_of_object_single_element(self, resolver: ResourceResolver) -> None:
        node = _pet(
            photos=SchemaNode(
                type="array",
                description="Photo list",
                items=SchemaNode(type="object", properties={"url": SchemaNode(type="string")}),
            )
        )
        resource, example, _ = resolver.resolve(node)
        assert example == {"photos": [{"url": "string"}]}
        assert resource.properties["photos"].description == "Photo list"

    def test_array_of_fully_read_only_objects(self, resolver: ResourceResolver) -> None:
        node = _pet(
            photos=SchemaNode(
                type="array",
                items=SchemaNode(
                    type="object",
                    properties={"url": SchemaNode(type="string", read_only=True)},
                ),
            )
        )
        _, example, _ = resolver.resolve(node, is_request=True)
        assert example == {"photos": []}

    def test_map_of_object(self, resolver: ResourceResolver) -> None:
        node = _pet(
            labels=SchemaNode(
                type="object",
                additional_properties=SchemaNode(
                    type="object", properties={"value": SchemaNode(type="string")}
                ),
            )
        )
        resource, example, _ = resolver.resolve(node)
        assert example == {"labels": {ADDITIONAL_PROPERTIES_KEY: {"value": "string"}}}
        entry = resource.properties["labels"].properties[ADDITIONAL_PROPERTIES_KEY]
        assert entry.type == ["map", "object"]

    def test_map_of_primitive(self, resolver: ResourceResolver) -> None:
        node = _pet(counts=SchemaNode(type="object", additional_properties=SchemaNode(type="integer")))
        resource, example, _ = resolver.resolve(node)
        assert example == {"counts": {"<key>": "integer"}}
        assert resource.properties["counts"].properties["<key>"].type == ["map", "integer"]

    def test_map_of_primitive_array(self, resolver: ResourceResolver) -> None:
        node = _pet(
            aliases=SchemaNode(
                type="object",
                additional_properties=SchemaNode(type="array", items=SchemaNode(type="string")),
            )
        )
        resource, example, _ = resolver.resolve(node)
        assert example == {"aliases": {"<key>": ["string"]}}
        assert resource.properties["aliases"].properties["<key>"].type == ["array", "string"]

    def test_map_of_object_array(self, resolver: ResourceResolver) -> None:
        node = _pet(
            links=SchemaNode(
                type="object",
                additional_properties=SchemaNode(
                    type="array",
                    items=SchemaNode(type="object", properties={"href": SchemaNode(type="string")}),
                ),
            )
        )
        _, example, _ = resolver.resolve(node)
        assert example == {"links": {"<key>": [{"href": "string"}]}}

    def test_top_level_additional_properties(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(title="Settings", type="object", additional_properties=SchemaNode())
        _, example, _ = resolver.resolve(node)
        assert example == {"<key>": {}}

    def test_all_of_is_additive(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(
            title="Dog",
            properties={"bark": SchemaNode(type="boolean")},
            all_of=[
                SchemaNode(required=["name"], properties={"name": SchemaNode(type="string")}),
                SchemaNode(properties={"age": SchemaNode(type="integer")}),
            ],
        )
        resource, example, _ = resolver.resolve(node)
        assert set(resource.properties) == {"bark", "name", "age"}
        assert example == {"bark": "boolean", "name": "string", "age": "integer"}
        assert resource.properties["name"].required is True
        assert resource.properties["age"].required is False

    def test_all_of_later_example_overwrites(self, resolver: ResourceResolver) -> None:
        node = SchemaNode(
            title="Dog",
            properties={"id": SchemaNode(type="string")},
            all_of=[SchemaNode(properties={"id": SchemaNode(type="integer")})],
        )
        resource, example, _ = resolver.resolve(node)
        assert example == {"id": "integer"}
        assert resource.properties["id"].type == ["integer"]

    def test_property_enum_stringified(self, resolver: ResourceResolver) -> None:
        node = _pet(
            status=SchemaNode(type="string", enum=["available", "sold"]),
            level=SchemaNode(type="integer", enum=[1, 2]),
        )
        resource = resolver.resolve(node).resource
        assert resource.properties["status"].enum == ["available", "sold"]
        assert resource.properties["level"].enum == ["1", "2"]


# ---------------------------------------------------------------------------
# Identifiers and namespaces
# ---------------------------------------------------------------------------


class TestNamespaces:
    def test_chopped_identifier_for_anonymous_property(self, resolver: ResourceResolver) -> None:
        node = _pet(owner=SchemaNode(type="object", properties={"name": SchemaNode(type="string")}))
        owner = resolver.resolve(node).resource.properties["owner"]
        assert owner.id == "owner"
        assert owner.fqns == []
        assert owner.properties["name"].id == "name"
        assert owner.properties["name"].fqns == ["owner"]

    def test_deep_namespace(self, resolver: ResourceResolver) -> None:
        address = SchemaNode(type="object", properties={"city": SchemaNode(type="string")})
        owner = SchemaNode(type="object", properties={"address": address})
        resource = resolver.resolve(_pet(owner=owner)).resource
        city = resource.properties["owner"].properties["address"].properties["city"]
        assert resource.properties["owner"].properties["address"].fqns == ["owner"]
        assert city.fqns == ["owner", "address"]

    def test_array_marker_in_namespace(self, resolver: ResourceResolver) -> None:
        node = _pet(
            photos=SchemaNode(
                type="array",
                items=SchemaNode(type="object", properties={"url": SchemaNode(type="string")}),
            ),
            tags=SchemaNode(type="array", items=SchemaNode(type="string")),
        )
        resource = resolver.resolve(node).resource
        photos = resource.properties["photos"]
        assert photos.id == "photos[]"
        assert photos.properties["url"].fqns == ["photos[]"]
        assert resource.properties["tags"].id == "tags[]"

    def test_titled_nested_object_named_by_property(self, resolver: ResourceResolver) -> None:
        category = SchemaNode(
            title="Category", type="object", properties={"id": SchemaNode(type="integer")}
        )
        resource = resolver.resolve(_pet(kind=category)).resource
        kind = resource.properties["kind"]
        assert kind.id == "kind"
        assert kind.title == "Category"
        assert kind.fqns == []
        assert kind.properties["id"].fqns == ["kind"]

    def test_sibling_namespaces_do_not_alias(self, resolver: ResourceResolver) -> None:
        person = {"name": SchemaNode(type="string")}
        node = _pet(
            owner=SchemaNode(type="object", properties=dict(person)),
            vet=SchemaNode(type="object", properties=dict(person)),
        )
        resource = resolver.resolve(node).resource
        assert resource.properties["owner"].properties["name"].fqns == ["owner"]
        assert resource.properties["vet"].properties["name"].fqns == ["vet"]


class TestPropertyNames:
    """OpenAPI 3.x resolves each property under the name that holds it."""

    @pytest.fixture
    def named(self, method: Method) -> ResourceResolver:
        return ResourceResolver(method, name_properties=True)

    def test_nested_object_titled_by_property(self, named: ResourceResolver) -> None:
        category = SchemaNode(
            title="Category", type="object", properties={"id": SchemaNode(type="integer")}
        )
        kind = named.resolve(_pet(kind=category)).resource.properties["kind"]
        assert kind.title == "kind"
        assert kind.description == "kind"
        assert kind.properties["id"].title == "id"

    def test_declared_description_kept(self, named: ResourceResolver) -> None:
        node = _pet(tag=SchemaNode(type="string", description="Free text"))
        assert named.resolve(node).resource.properties["tag"].description == "Free text"

    def test_identifiers_unchanged(self, named: ResourceResolver, resolver: ResourceResolver) -> None:
        address = SchemaNode(type="object", properties={"city": SchemaNode(type="string")})
        node = _pet(owner=SchemaNode(type="object", properties={"address": address}))
        for subject in (named, resolver):
            owner = subject.resolve(node).resource.properties["owner"]
            city = owner.properties["address"].properties["city"]
            assert (owner.id, owner.fqns) == ("owner", [])
            assert (city.id, city.fqns) == ("city", ["owner", "address"])

    def test_top_level_keeps_schema_title(self, named: ResourceResolver) -> None:
        resource = named.resolve(_pet(id=SchemaNode(type="integer"))).resource
        assert resource.id == "pet"
        assert resource.title == "Pet"

    def test_off_by_default(self, resolver: ResourceResolver) -> None:
        owner = SchemaNode(type="object", properties={"name": SchemaNode(type="string")})
        assert resolver.resolve(_pet(owner=owner)).resource.properties["owner"].title == ""


class TestHelpers:
    def test_prepare_namespace(self) -> None:
        assert prepare_namespace(("a",), "b", "c", chopped=True) == ("a", "b", "c")
        assert prepare_namespace(("a",), "b", "c", chopped=False) == ("a", "c")
        assert prepare_namespace((), "", "c", chopped=True) == ("c",)

    def test_prepare_namespace_does_not_mutate(self) -> None:
        base = ("a",)
        prepare_namespace(base, "b", "c", chopped=True)
        assert base == ("a",)

    def test_stringify_enum(self) -> None:
        assert stringify_enum(["a", 1, True, None, 1.5]) == ["a", "1", "true", "null", "1.5"]
