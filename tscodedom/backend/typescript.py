"""TypeScript backend: declaration tree -> TypeScript source text.

Every render method takes the indent prefix of the line it starts on and
returns text. Nested scopes pass `indent + indent_str` down; nothing is saved
or restored, so sibling sub-trees never observe each other's indentation.

Output conventions:
- declaration line: `export class Name<T extends C> extends A,B {`
- enum body inline: `export enum Color {Red, Green=2, Blue}`
- fields and properties: `name: T;`, or `name?: T;` when T maps to a nullable type
- methods: blank line, `name(p: T): R{`, body, `}`; constructors drop the
  return clause; a nullable return type becomes `: any`
- statements in a block end with `;`, raw snippets do not

Node kinds the IR can describe but TypeScript output cannot (array creation,
indexers, casts, goto, labels, event wiring) are omitted with a warning
diagnostic, or raise UnsupportedNodeError when the emitter is strict.
"""

from __future__ import annotations

import logging
from typing import Iterable, TextIO

from ..diagnostics import Diagnostics
from ..ir import (
    ArgumentRef,
    ArrayCreate,
    Assign,
    AttachEvent,
    Cast,
    Catch,
    Comment,
    Condition,
    Expr,
    ExprStmt,
    Field,
    FieldRef,
    ForLoop,
    Goto,
    Indexer,
    Labeled,
    Member,
    Method,
    MethodInvoke,
    MethodRef,
    ObjectCreate,
    ParameterDecl,
    Primitive,
    Property,
    PropertyRef,
    RemoveEvent,
    Return,
    SnippetExpr,
    SnippetMember,
    SnippetStmt,
    Stmt,
    ThisRef,
    Throw,
    TryCatchFinally,
    TypeDeclaration,
    TypeRef,
    TypeReference,
    VarDecl,
    VariableRef,
)
from ..typemap import NULLABLE_MARKER, TypeMapper
from .util import INDENT_UNIT, Emitter, escape_string, indent_lines, split_lines

logger = logging.getLogger(__name__)

# Statement kinds omitted from output (see `_unsupported`).
_UNSUPPORTED_STATEMENTS = (Goto, Labeled, AttachEvent, RemoveEvent)


class EmitError(Exception):
    """The tree violates an assumption the emitter cannot recover from."""


class UnsupportedNodeError(EmitError):
    """A known node kind with no TypeScript rendering, raised in strict mode."""

    def __init__(self, node: object):
        self.node: object = node
        super().__init__("unsupported node: " + type(node).__name__)


def emit_typescript(
    decls: Iterable[TypeDeclaration],
    mapper: TypeMapper | None = None,
    strict: bool = False,
    indent_str: str = INDENT_UNIT,
) -> str:
    """Render declarations separated by blank lines."""
    emitter = TsEmitter(mapper, indent_str=indent_str, strict=strict)
    return emitter.render_declarations(decls)


class TsEmitter:
    """Emit TypeScript from declaration trees."""

    def __init__(
        self,
        mapper: TypeMapper | None = None,
        indent_str: str = INDENT_UNIT,
        strict: bool = False,
    ) -> None:
        self.mapper: TypeMapper = mapper if mapper is not None else TypeMapper()
        self.indent_str: str = indent_str
        self.strict: bool = strict
        self.diagnostics: Diagnostics = Diagnostics()

    # ── Declarations ────────────────────────────────────────

    def render_declarations(self, decls: Iterable[TypeDeclaration], indent: str = "") -> str:
        return "\n".join(self.render_type_declaration(d, indent) for d in decls)

    def write_type_declaration(
        self, decl: TypeDeclaration, sink: TextIO, indent: str = ""
    ) -> None:
        sink.write(self.render_type_declaration(decl, indent))

    def render_type_declaration(self, decl: TypeDeclaration, indent: str = "") -> str:
        logger.debug("rendering %s %s", decl.kind, decl.name)
        access = "export " if decl.is_public else ""
        type_params = self.render_generic_parameters(decl)
        bases = self.render_base_types(decl)
        header = f"{indent}{access}{decl.kind} {decl.name}{type_params}{bases} {{"
        return header + self.render_members(decl, indent)

    def render_generic_parameters(self, decl: TypeDeclaration) -> str:
        if decl.is_enum or not decl.type_params:
            return ""
        parts: list[str] = []
        for param in decl.type_params:
            # Only the first constraint is rendered.
            if param.constraints:
                constraint = self.mapper.to_text(param.constraints[0])
                parts.append(f"{param.name} extends {constraint}")
            else:
                parts.append(param.name)
        return "<" + ", ".join(parts) + ">"

    def render_base_types(self, decl: TypeDeclaration) -> str:
        if decl.is_enum:
            return ""
        bases = [
            self.mapper.to_text(ref)
            for ref in decl.base_types
            if self.mapper.is_valid_for_derivation(ref)
        ]
        if not bases:
            return ""
        return " extends " + ",".join(bases)

    def render_members(self, decl: TypeDeclaration, indent: str = "") -> str:
        """Render the body after the opening brace, including the closing brace."""
        if decl.is_enum:
            return ", ".join(self._enum_member(m) for m in decl.members) + "}\n"
        inner = indent + self.indent_str
        out = Emitter()
        out.line()
        for member in decl.members:
            out.write(self._member(member, inner))
        out.line(indent + "}")
        return out.output()

    def _enum_member(self, member: Member) -> str:
        match member:
            case Field(name=name, init=None):
                return name
            case Field(name=name, init=Primitive() as init):
                return f"{name}={self.render_expression(init)}"
            case Field(name=name, init=init):
                raise EmitError(
                    f"enum member {name} has a non-constant initializer: {type(init).__name__}"
                )
            case _:
                raise EmitError(f"enum member is not a field: {type(member).__name__}")

    def _member(self, member: Member, indent: str) -> str:
        match member:
            case Field(name=name, typ=typ):
                return indent + self._name_and_type(name, typ) + ";\n"
            case Property(name=name, typ=typ):
                return indent + self._name_and_type(name, typ) + ";\n"
            case Method():
                return self._method(member, indent)
            case SnippetMember(text=text):
                return indent + text + "\n"
            case _:
                raise EmitError(f"unknown member: {type(member).__name__}")

    def _name_and_type(self, name: str, typ: TypeReference | None) -> str:
        """`name: T`, moving a nullable marker from the type onto the name."""
        if typ is None:
            return name
        text = self.mapper.to_text(typ)
        if text.endswith(NULLABLE_MARKER):
            return f"{name}{NULLABLE_MARKER}: {text.rstrip(NULLABLE_MARKER)}"
        return f"{name}: {text}"

    def _method(self, method: Method, indent: str) -> str:
        out = Emitter()
        out.line()
        if method.doc:
            out.write(self._doc_comment(method.doc, indent))
        name = "constructor" if method.is_constructor else method.name
        params = ", ".join(self.render_expression(p) for p in method.params)
        out.line(f"{indent}{name}({params}){self._return_clause(method)}{{")
        out.write(self.render_statement_block(method.body, indent))
        out.line(indent + "}")
        return out.output()

    def _return_clause(self, method: Method) -> str:
        if method.is_constructor or method.return_type is None:
            return ""
        text = self.mapper.to_text(method.return_type)
        if text == "void":
            return ""
        if NULLABLE_MARKER in text:
            return ": any"
        return ": " + text

    def _doc_comment(self, doc: str, indent: str) -> str:
        lines = [indent + "/**"]
        for line in split_lines(doc.strip()):
            lines.append((indent + " * " + line).rstrip())
        lines.append(indent + " */")
        return "\n".join(lines) + "\n"

    # ── Statements ──────────────────────────────────────────

    def render_statement_block(self, stmts: Iterable[Stmt], indent: str = "") -> str:
        """Render statements one level deeper than `indent`."""
        inner = indent + self.indent_str
        out = Emitter()
        for stmt in stmts:
            if isinstance(stmt, SnippetStmt):
                out.line()
                out.line(indent_lines(stmt.text, inner))
                continue
            text = self.render_statement(stmt, inner)
            if isinstance(stmt, _UNSUPPORTED_STATEMENTS) and not text:
                continue
            # Statements opening with a blank line carry their own indentation.
            prefix = "" if text.startswith("\n") else inner
            out.line(prefix + text + ";")
        return out.output()

    def render_statement(self, stmt: Stmt, indent: str = "") -> str:
        """Render one statement starting at `indent`, without its terminator."""
        match stmt:
            case Assign(left=left, right=right):
                return f"{self.render_expression(left)} = {self.render_expression(right)}"
            case Comment(text=text):
                return text
            case Condition(test=test, then_body=then_body, else_body=else_body):
                text = (
                    f"if ({self.render_expression(test)}){{\n"
                    + self.render_statement_block(then_body, indent)
                    + indent
                    + "}"
                )
                if else_body is not None:
                    text += (
                        f"\n{indent}{{\n"
                        + self.render_statement_block(else_body, indent)
                        + indent
                        + "}"
                    )
                return text
            case ExprStmt(expr=expr):
                return self.render_expression(expr)
            case ForLoop(init=init, test=test, increment=increment, body=body):
                init_str = self.render_statement(init, indent)
                test_str = self.render_expression(test)
                increment_str = self.render_statement(increment, indent)
                return (
                    f"for ({init_str}; {test_str}; {increment_str}){{\n"
                    + self.render_statement_block(body, indent)
                    + indent
                    + "}"
                )
            case Return(expr=None):
                return "return"
            case Return(expr=expr):
                return "return " + self.render_expression(expr)
            case Throw(expr=expr):
                return "throw " + self.render_expression(expr)
            case TryCatchFinally():
                return self._try_catch_finally(stmt, indent)
            case VarDecl(typ=typ, name=name, init=init):
                text = f"{self.mapper.to_text(typ)} {name}"
                if init is not None:
                    text += " = " + self.render_expression(init)
                return text
            case SnippetStmt(text=text):
                return text
            case Goto() | Labeled() | AttachEvent() | RemoveEvent():
                return self._unsupported(stmt)
            case _:
                raise EmitError(f"unknown statement: {type(stmt).__name__}")

    def _try_catch_finally(self, stmt: TryCatchFinally, indent: str) -> str:
        text = (
            f"\n{indent}try {{\n"
            + self.render_statement_block(stmt.try_body, indent)
            + indent
            + "}"
        )
        for clause in stmt.catches:
            text += self._catch(clause, indent)
        if stmt.finally_body:
            text += (
                f"\n{indent}finally {{\n"
                + self.render_statement_block(stmt.finally_body, indent)
                + indent
                + "}"
            )
        return text

    def _catch(self, clause: Catch, indent: str) -> str:
        # A catch binding cannot carry a type annotation beyond any/unknown.
        return (
            f"\n{indent}catch ({clause.local_name}) {{\n"
            + self.render_statement_block(clause.body, indent)
            + indent
            + "}"
        )

    # ── Expressions ─────────────────────────────────────────

    def render_expression(self, expr: Expr) -> str:
        match expr:
            case ArgumentRef(name=name):
                return name
            case FieldRef(target=target, field_name=field_name):
                return f"{self.render_expression(target)}.{field_name}"
            case MethodInvoke(target=target, method_name=method_name, args=args):
                return f"{self.render_expression(target)}.{method_name}({self._args(args)})"
            case MethodRef(target=target, method_name=method_name, type_args=type_args):
                types = ", ".join(self.mapper.to_text(t) for t in type_args)
                return f"{self.render_expression(target)}.{method_name}({types})"
            case ObjectCreate(typ=typ, args=args):
                return f"new {self.mapper.to_text(typ)}({self._args(args)})"
            case ParameterDecl(name=name, typ=typ):
                return f"{name}: {self.mapper.to_text(typ)}"
            case Primitive(value=value):
                return _literal(value)
            case PropertyRef(target=target, property_name=property_name):
                return f"{self.render_expression(target)}.{property_name}"
            case SnippetExpr(text=text):
                return text
            case ThisRef():
                return "this"
            case TypeRef(typ=typ):
                return self.mapper.to_text(typ)
            case VariableRef(name=name):
                return name
            case ArrayCreate() | Indexer() | Cast():
                return self._unsupported(expr)
            case _:
                raise EmitError(f"unknown expression: {type(expr).__name__}")

    def _args(self, args: Iterable[Expr]) -> str:
        return ", ".join(self.render_expression(a) for a in args)

    def _unsupported(self, node: object) -> str:
        if self.strict:
            raise UnsupportedNodeError(node)
        message = type(node).__name__ + " has no TypeScript rendering; omitted"
        logger.warning(message)
        self.diagnostics.add_warning("unsupported", message)
        return ""


def _literal(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return '"' + escape_string(value) + '"'
    return str(value)
