"""Tests for the HTTP client method-skeleton builder."""

import pytest

from tscodedom.backend.typescript import TsEmitter
from tscodedom.ir import Method, Return, TypeReference
from tscodedom.skeleton import (
    ApiDescription,
    ApiParameter,
    FunctionBuilder,
    HttpClientFunctionBuilder,
    api_method_name,
    build_client_class,
    create_uri_query,
    remove_trailing_empty_string,
)

INT = TypeReference("int")
STRING = TypeReference("string")
PERSON = TypeReference("DemoWebApi.Person")


def _render_method(method: Method) -> str:
    emitter = TsEmitter()
    return emitter.render_statement_block(method.body, "")


@pytest.mark.parametrize(
    "action,camel_case,expected",
    [
        ("GetValues", True, "getValues"),
        ("GetValuesAsync", True, "getValues"),
        ("GetValuesAsync", False, "GetValues"),
        ("Async", True, "async"),
        ("Delete", False, "Delete"),
    ],
)
def test_api_method_name(action: str, camel_case: bool, expected: str):
    assert api_method_name(action, camel_case) == expected


def test_uri_query_without_variables():
    assert create_uri_query("api/Values", [ApiParameter("id", INT)]) is None


def test_uri_query_splices_parameters():
    params = [ApiParameter("id", INT), ApiParameter("name", STRING)]
    query = create_uri_query("api/Values/{id}?name={name}", params)
    assert query == "api/Values/'+id+'?name='+name+'"


def test_uri_query_matches_case_insensitively():
    query = create_uri_query("api/Values/{Id}/{tag?}", [ApiParameter("id", INT), ApiParameter("tag", STRING)])
    assert query == "api/Values/'+id+'/'+tag+'"


def test_uri_query_unmatched_variable():
    with pytest.raises(ValueError):
        create_uri_query("api/Values/{id}", [ApiParameter("name", STRING)])


def test_remove_trailing_empty_string():
    assert remove_trailing_empty_string("this.baseUri + 'api/'+id+''") == "this.baseUri + 'api/'+id"
    assert remove_trailing_empty_string("this.baseUri + 'api/'+id+'/x'") == (
        "this.baseUri + 'api/'+id+'/x'"
    )


def test_doc_comments():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription(
        "GetPerson",
        "GET",
        "api/People/{id}",
        (ApiParameter("id", INT, "The id"),),
        PERSON,
        "Get a person",
        "The person",
    )
    assert builder.create_doc_comments(description) == (
        "Get a person\nGET api/People/{id}\n@param {number} id The id\n@return {DemoWebApi.Person} The person"
    )


def test_doc_comments_without_documentation():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription("Delete", "DELETE", "api/People/{id}", (ApiParameter("id", INT),))
    assert builder.create_doc_comments(description) == (
        "DELETE api/People/{id}\n@param {number} id\n@return {void}"
    )


def test_get_method():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription(
        "GetPersonAsync", "GET", "api/People/{id}", (ApiParameter("id", INT),), PERSON
    )
    method = builder.create_api_function(description)
    assert method.name == "getPerson"
    assert method.return_type == TypeReference("Observable", args=(PERSON,))
    assert [p.name for p in method.params] == ["id"]
    assert _render_method(method) == (
        "    return this.http.get<DemoWebApi.Person>(this.baseUri + 'api/People/'+id);\n"
    )
    assert builder.diagnostics.ok()
    assert len(builder.diagnostics) == 0


def test_post_with_body():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription(
        "Post", "POST", "api/Values", (ApiParameter("value", STRING, from_body=True),)
    )
    method = builder.create_api_function(description)
    assert method.return_type == TypeReference("Observable", args=(TypeReference("Response"),))
    assert _render_method(method) == (
        "    return this.http.post<Response>(this.baseUri + 'api/Values', JSON.stringify(value), "
        "{ headers: { 'Content-Type': 'application/json;charset=UTF-8' } });\n"
    )


def test_put_without_body_sends_null():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription("Touch", "PUT", "api/Values/{id}/touch", (ApiParameter("id", INT),))
    text = _render_method(builder.create_api_function(description))
    assert "this.http.put<Response>(this.baseUri + 'api/Values/'+id+'/touch', null, " in text


def test_nullable_response_is_any():
    builder = HttpClientFunctionBuilder()
    description = ApiDescription(
        "Find", "GET", "api/People", (), TypeReference("int", nullable=True)
    )
    text = _render_method(builder.create_api_function(description))
    assert "this.http.get<any>(this.baseUri + 'api/People')" in text


def test_custom_http_name():
    builder = HttpClientFunctionBuilder(http_name="client")
    description = ApiDescription("List", "GET", "api/Values", (), TypeReference("List", args=(STRING,)))
    text = _render_method(builder.create_api_function(description))
    assert text == "    return this.client.get<Array<string>>(this.baseUri + 'api/Values');\n"


def test_unsupported_http_method():
    builder = HttpClientFunctionBuilder()
    method = builder.create_api_function(ApiDescription("Patch", "PATCH", "api/Values"))
    assert method.body == ()
    warnings = builder.diagnostics.warnings()
    assert len(warnings) == 1
    assert warnings[0].category == "http-method"
    assert "PATCH" in warnings[0].message


def test_http_method_is_case_insensitive():
    builder = HttpClientFunctionBuilder()
    method = builder.create_api_function(ApiDescription("Get", "get", "api/Values"))
    assert isinstance(method.body[0], Return)


def test_base_builder_is_abstract():
    builder = FunctionBuilder()
    with pytest.raises(NotImplementedError):
        builder.create_api_function(ApiDescription("Get", "GET", "api/Values"))


def test_client_class():
    description = ApiDescription("Get", "GET", "api/Values/{id}", (ApiParameter("id", INT),), STRING)
    decl = build_client_class("ValuesClient", [description])
    assert TsEmitter().render_type_declaration(decl) == (
        "export class ValuesClient {\n"
        "    baseUri: string;\n"
        "    http: HttpClient;\n"
        "\n"
        "    constructor(baseUri: string, http: HttpClient){\n"
        "        this.baseUri = baseUri;\n"
        "        this.http = http;\n"
        "    }\n"
        "\n"
        "    /**\n"
        "     * GET api/Values/{id}\n"
        "     * @param {number} id\n"
        "     * @return {string}\n"
        "     */\n"
        "    get(id: number): Observable<string>{\n"
        "        return this.http.get<string>(this.baseUri + 'api/Values/'+id);\n"
        "    }\n"
        "}\n"
    )
