"""Tests for JSON serialization of declaration trees."""

import json

import pytest

from tscodedom.ir import (
    Condition,
    Field,
    Method,
    ParameterDecl,
    Primitive,
    Return,
    SnippetExpr,
    TypeDeclaration,
    TypeReference,
    VariableRef,
)
from tscodedom.serialize import deserialize, serialize
from tscodedom.skeleton import ApiDescription, ApiParameter


def test_serialize_tags_nodes():
    data = serialize(Field("id", TypeReference("int")))
    assert data == {
        "_type": "Field",
        "name": "id",
        "typ": {"_type": "TypeReference", "name": "int", "nullable": False, "args": []},
        "init": None,
    }


def test_tree_survives_json():
    decl = TypeDeclaration(
        "Sign",
        members=(
            Method(
                "of",
                params=(ParameterDecl("n", TypeReference("double")),),
                return_type=TypeReference("int"),
                body=(
                    Condition(SnippetExpr("n < 0"), (Return(Primitive(-1)),)),
                    Return(VariableRef("n")),
                ),
            ),
        ),
    )
    assert deserialize(json.loads(json.dumps(serialize(decl)))) == decl


def test_api_description_survives_json():
    description = ApiDescription(
        "Post", "POST", "api/Values", (ApiParameter("value", TypeReference("string"), from_body=True),)
    )
    assert deserialize(json.loads(json.dumps(serialize(description)))) == description


def test_defaults_fill_omitted_fields():
    decl = deserialize({"_type": "TypeDeclaration", "name": "Foo", "kind": "interface"})
    assert decl == TypeDeclaration("Foo", kind="interface")


def test_lists_become_tuples():
    decl = deserialize(
        {"_type": "TypeDeclaration", "name": "Foo", "members": [{"_type": "Field", "name": "a"}]}
    )
    assert decl.members == (Field("a"),)


@pytest.mark.parametrize(
    "data,message",
    [
        ({"name": "Foo"}, "object without _type"),
        ({"_type": "Widget"}, "unknown node type: Widget"),
        ({"_type": "Stmt"}, "unknown node type: Stmt"),
        ({"_type": "Field", "name": "a", "color": "red"}, "unknown field color for Field"),
        ({"_type": "Field"}, "bad Field"),
    ],
)
def test_deserialize_errors(data: dict, message: str):
    with pytest.raises(ValueError) as exc:
        deserialize(data)
    assert message in str(exc.value)


def test_serialize_rejects_foreign_objects():
    with pytest.raises(ValueError):
        serialize(object())
