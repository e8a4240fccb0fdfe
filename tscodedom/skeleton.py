"""Method-skeleton builder: HTTP API operation descriptions -> Method trees.

A FunctionBuilder turns one ApiDescription into a Method the emitter can
render: the name comes from the action name, the JSDoc block from the
operation's documentation, and the body from `render_implementation`, which
concrete builders supply. HttpClientFunctionBuilder produces Angular-style
methods returning `Observable<T>`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .backend.util import lower_first
from .diagnostics import Diagnostics
from .ir import (
    ArgumentRef,
    Assign,
    Expr,
    Field,
    Member,
    Method,
    MethodInvoke,
    ParameterDecl,
    Primitive,
    PropertyRef,
    Return,
    SnippetExpr,
    Stmt,
    ThisRef,
    TypeDeclaration,
    TypeReference,
    VariableRef,
)
from .typemap import NULLABLE_MARKER, TypeMapper

logger = logging.getLogger(__name__)

SUPPORTED_HTTP_METHODS: tuple[str, ...] = ("GET", "DELETE", "POST", "PUT")

_URI_VARIABLE = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class ApiParameter:
    """One parameter of an API operation."""

    name: str
    typ: TypeReference
    documentation: str = ""
    from_body: bool = False


@dataclass(frozen=True)
class ApiDescription:
    """One HTTP API operation.

    relative_path is a URI template: `api/Values/{id}?name={name}`.
    """

    action_name: str
    http_method: str
    relative_path: str
    parameters: tuple[ApiParameter, ...] = ()
    response_type: TypeReference | None = None
    documentation: str = ""
    response_documentation: str = ""


def api_method_name(action_name: str, camel_case: bool = True) -> str:
    """Client method name: optionally camelCased, with a trailing `Async` dropped.

    HTTP does not care whether the server-side action is asynchronous.
    """
    name = lower_first(action_name) if camel_case else action_name
    if name.endswith("Async"):
        name = name[: -len("Async")]
    return name


def create_uri_query(uri_text: str, parameters: Iterable[ApiParameter]) -> str | None:
    """Splice parameters into a URI template as string concatenation.

    `api/Values/{id}` becomes `api/Values/'+id+'`, ready to sit inside a
    single-quoted literal. Returns None when the template has no variables.
    """
    variables = _URI_VARIABLE.findall(uri_text)
    if not variables:
        return None
    params = list(parameters)
    result = uri_text
    for variable in variables:
        wanted = variable.rstrip("?").lower()
        found = None
        for p in params:
            if p.name.lower() == wanted:
                found = p
                break
        if found is None:
            raise ValueError(f"no parameter matches {{{variable}}} in {uri_text}")
        result = result.replace("{" + variable + "}", f"'+{found.name}+'")
    return result


def remove_trailing_empty_string(text: str) -> str:
    """Drop the `+''` left behind when a URI ends with a variable."""
    if text.endswith("+''"):
        return text[: -len("+''")]
    return text


class FunctionBuilder:
    """Build client Methods from ApiDescriptions.

    Subclasses provide `create_return_type` and `render_implementation`.
    """

    def __init__(self, mapper: TypeMapper | None = None, camel_case: bool = True) -> None:
        self.mapper: TypeMapper = mapper if mapper is not None else TypeMapper()
        self.camel_case: bool = camel_case
        self.diagnostics: Diagnostics = Diagnostics()

    def create_api_function(self, description: ApiDescription) -> Method:
        name = api_method_name(description.action_name, self.camel_case)
        body: tuple[Stmt, ...] = ()
        if description.http_method.upper() in SUPPORTED_HTTP_METHODS:
            body = tuple(self.render_implementation(description))
        else:
            message = f"HTTP method {description.http_method} is not yet supported ({name})"
            logger.warning(message)
            self.diagnostics.add_warning("http-method", message)
        return Method(
            name=name,
            params=self.create_parameters(description),
            return_type=self.create_return_type(description),
            body=body,
            doc=self.create_doc_comments(description),
        )

    def create_doc_comments(self, description: ApiDescription) -> str:
        lines: list[str] = []
        if description.documentation:
            lines.append(description.documentation)
        lines.append(f"{description.http_method} {description.relative_path}")
        for p in description.parameters:
            type_text = self.mapper.to_text(p.typ)
            lines.append(f"@param {{{type_text}}} {p.name} {p.documentation}".rstrip())
        if description.response_type is None:
            response_text = "void"
        else:
            response_text = self.mapper.to_text(description.response_type)
        lines.append(f"@return {{{response_text}}} {description.response_documentation}".rstrip())
        return "\n".join(lines)

    def create_parameters(self, description: ApiDescription) -> tuple[ParameterDecl, ...]:
        return tuple(ParameterDecl(p.name, p.typ) for p in description.parameters)

    def create_return_type(self, description: ApiDescription) -> TypeReference | None:
        raise NotImplementedError

    def render_implementation(self, description: ApiDescription) -> list[Stmt]:
        raise NotImplementedError


class HttpClientFunctionBuilder(FunctionBuilder):
    """Methods calling an Angular-style `HttpClient` held in `this.<http_name>`."""

    JSON_OPTIONS: str = "{ headers: { 'Content-Type': 'application/json;charset=UTF-8' } }"

    def __init__(
        self,
        mapper: TypeMapper | None = None,
        camel_case: bool = True,
        http_name: str = "http",
    ) -> None:
        super().__init__(mapper, camel_case)
        self.http_name: str = http_name

    def response_type(self, description: ApiDescription) -> TypeReference:
        if description.response_type is None:
            return TypeReference("Response")
        return description.response_type

    def create_return_type(self, description: ApiDescription) -> TypeReference:
        return TypeReference("Observable", args=(self.response_type(description),))

    def uri_expression(self, description: ApiDescription) -> str:
        query = create_uri_query(description.relative_path, description.parameters)
        if query is None:
            return f"this.baseUri + '{description.relative_path}'"
        return remove_trailing_empty_string(f"this.baseUri + '{query}'")

    def render_implementation(self, description: ApiDescription) -> list[Stmt]:
        verb = description.http_method.lower()
        response_text = self.mapper.to_text(self.response_type(description))
        if NULLABLE_MARKER in response_text:
            response_text = "any"
        args: list[Expr] = [SnippetExpr(self.uri_expression(description))]
        if verb in ("post", "put"):
            args.append(self._content(description))
            args.append(SnippetExpr(self.JSON_OPTIONS))
        call = MethodInvoke(
            PropertyRef(ThisRef(), self.http_name), f"{verb}<{response_text}>", tuple(args)
        )
        return [Return(call)]

    def _content(self, description: ApiDescription) -> Expr:
        for p in description.parameters:
            if p.from_body:
                return MethodInvoke(VariableRef("JSON"), "stringify", (ArgumentRef(p.name),))
        return Primitive(None)


def build_client_class(
    name: str,
    descriptions: Iterable[ApiDescription],
    builder: HttpClientFunctionBuilder | None = None,
) -> TypeDeclaration:
    """Exported client class: `baseUri` and HTTP client fields, a constructor,
    and one method per operation."""
    if builder is None:
        builder = HttpClientFunctionBuilder()
    string_type = TypeReference("System.String")
    http_type = TypeReference("HttpClient")
    members: list[Member] = [
        Field("baseUri", string_type),
        Field(builder.http_name, http_type),
        Method(
            name="constructor",
            is_constructor=True,
            params=(
                ParameterDecl("baseUri", string_type),
                ParameterDecl(builder.http_name, http_type),
            ),
            body=(
                Assign(PropertyRef(ThisRef(), "baseUri"), ArgumentRef("baseUri")),
                Assign(
                    PropertyRef(ThisRef(), builder.http_name), ArgumentRef(builder.http_name)
                ),
            ),
        ),
    ]
    for description in descriptions:
        members.append(builder.create_api_function(description))
    return TypeDeclaration(name=name, kind="class", members=tuple(members))
