"""tscodedom IR - the declaration tree handed to the TypeScript emitter.

Every node is a frozen dataclass; sequences are tuples. Trees are built
wholesale (by the skeleton builder, the JSON loader, or a caller) and then
rendered. The emitter never mutates a node.

Architecture:
    ApiDescription -> Skeleton builder -> [IR] -> Emitter -> TypeScript text
                                             ^
                                      TypeMapper (type text)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


# ============================================================
# TYPES
#
# Type descriptors are abstract: only the TypeMapper turns them into text.
# ============================================================


@dataclass(frozen=True)
class TypeReference:
    """Abstract type descriptor, possibly generic, possibly nullable.

    | name                         | args            | TS text             |
    |------------------------------|-----------------|---------------------|
    | System.Int32                 | ()              | number              |
    | System.Nullable              | (Int32,)        | number?             |
    | List                         | (Person,)       | Array<Person>       |
    | Dictionary                   | (String, Int32) | {[id: string]: number} |
    | DemoWebApi.Person            | ()              | DemoWebApi.Person   |

    Invariants:
    - nullable=True makes the mapped text end with the "?" marker
    """

    name: str
    nullable: bool = False
    args: tuple[TypeReference, ...] = ()


@dataclass(frozen=True)
class TypeParameter:
    """Generic type parameter of a declaration.

    Only the first constraint is ever rendered.
    """

    name: str
    constraints: tuple[TypeReference, ...] = ()


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Expr:
    """Base for all expressions. Abstract."""


@dataclass(frozen=True)
class ArgumentRef(Expr):
    """Reference to a method argument: `name`."""

    name: str


@dataclass(frozen=True)
class FieldRef(Expr):
    """Field access: `target.field_name`."""

    target: Expr
    field_name: str


@dataclass(frozen=True)
class MethodInvoke(Expr):
    """Method call: `target.method_name(arg, arg)`."""

    target: Expr
    method_name: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class MethodRef(Expr):
    """Generic method reference without invocation.

    Renders as `target.method_name(T1, T2)`: type arguments are written in the
    argument list, not in angle brackets.
    """

    target: Expr
    method_name: str
    type_args: tuple[TypeReference, ...] = ()


@dataclass(frozen=True)
class ObjectCreate(Expr):
    """Construction: `new T(arg, arg)`."""

    typ: TypeReference
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class ParameterDecl(Expr):
    """Parameter declaration in an expression position: `name: T`.

    Also used for method parameter lists.
    """

    name: str
    typ: TypeReference


@dataclass(frozen=True)
class Primitive(Expr):
    """Literal value.

    | Python value | TS text       |
    |--------------|---------------|
    | str          | "quoted"      |
    | bool         | true / false  |
    | None         | null          |
    | int, float   | str(value)    |
    """

    value: object


@dataclass(frozen=True)
class PropertyRef(Expr):
    """Property access: `target.property_name`."""

    target: Expr
    property_name: str


@dataclass(frozen=True)
class SnippetExpr(Expr):
    """Raw expression text, emitted verbatim and unvalidated."""

    text: str


@dataclass(frozen=True)
class ThisRef(Expr):
    """Self reference: `this`."""


@dataclass(frozen=True)
class TypeRef(Expr):
    """Type used as an expression, e.g. the target of a static call."""

    typ: TypeReference


@dataclass(frozen=True)
class VariableRef(Expr):
    """Local variable reference: `name`."""

    name: str


# Known expression kinds the emitter does not render. Rendering one either
# omits it with a warning or, in strict mode, raises UnsupportedNodeError.


@dataclass(frozen=True)
class ArrayCreate(Expr):
    """Array construction."""

    typ: TypeReference
    items: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Indexer(Expr):
    """Indexed access: `target[i, j]`."""

    target: Expr
    indices: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Cast(Expr):
    """Type cast."""

    typ: TypeReference
    expr: Expr


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Stmt:
    """Base for all statements. Abstract."""


@dataclass(frozen=True)
class Assign(Stmt):
    """Assignment: `left = right`."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Comment(Stmt):
    """Comment emitted verbatim; the text carries its own markers (// or /* */)."""

    text: str


@dataclass(frozen=True)
class Condition(Stmt):
    """If statement.

    Invariants:
    - else_body=None means no else branch at all
    - else_body=() means an else branch with an empty block
    """

    test: Expr
    then_body: tuple[Stmt, ...] = ()
    else_body: tuple[Stmt, ...] | None = None


@dataclass(frozen=True)
class ExprStmt(Stmt):
    """Expression evaluated for side effects."""

    expr: Expr


@dataclass(frozen=True)
class ForLoop(Stmt):
    """Classic for loop: `for (init; test; increment){ body }`."""

    init: Stmt
    test: Expr
    increment: Stmt
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class Return(Stmt):
    """Return statement; expr=None renders a bare `return`."""

    expr: Expr | None = None


@dataclass(frozen=True)
class Throw(Stmt):
    """Throw statement."""

    expr: Expr


@dataclass(frozen=True)
class Catch:
    """Catch clause. The bound value is untyped in TypeScript."""

    local_name: str
    body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class TryCatchFinally(Stmt):
    """Try statement.

    Invariants:
    - an empty finally_body renders no finally clause
    """

    try_body: tuple[Stmt, ...] = ()
    catches: tuple[Catch, ...] = ()
    finally_body: tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class VarDecl(Stmt):
    """Local variable declaration: `T name = init`."""

    typ: TypeReference
    name: str
    init: Expr | None = None


@dataclass(frozen=True)
class SnippetStmt(Stmt):
    """Raw statement text. Each line is indented; no terminator is added."""

    text: str


# Known statement kinds the emitter does not render.


@dataclass(frozen=True)
class Goto(Stmt):
    label: str


@dataclass(frozen=True)
class Labeled(Stmt):
    label: str
    stmt: Stmt | None = None


@dataclass(frozen=True)
class AttachEvent(Stmt):
    event: Expr
    listener: Expr


@dataclass(frozen=True)
class RemoveEvent(Stmt):
    event: Expr
    listener: Expr


# ============================================================
# MEMBERS
# ============================================================


@dataclass(frozen=True)
class Member:
    """Base for type members. Abstract."""


@dataclass(frozen=True)
class Field(Member):
    """Field: `name: T;` (or `name?: T;` when T is nullable).

    In an enum the field is a member; init must then be None or a Primitive.
    """

    name: str
    typ: TypeReference | None = None
    init: Expr | None = None


@dataclass(frozen=True)
class Property(Member):
    """Property, rendered exactly like a field."""

    name: str
    typ: TypeReference


@dataclass(frozen=True)
class Method(Member):
    """Method or constructor.

    Invariants:
    - is_constructor=True renders the `constructor` keyword and no return type
    - return_type=None renders no return type
    """

    name: str
    is_constructor: bool = False
    params: tuple[ParameterDecl, ...] = ()
    return_type: TypeReference | None = None
    body: tuple[Stmt, ...] = ()
    doc: str | None = None


@dataclass(frozen=True)
class SnippetMember(Member):
    """Raw member text, emitted verbatim after the member indent."""

    text: str


# ============================================================
# DECLARATIONS
# ============================================================


TypeKind = Literal["class", "interface", "enum"]


@dataclass(frozen=True)
class TypeDeclaration:
    """Class, interface or enum.

    Invariants:
    - enums never emit type parameters or base types
    - enum members are Fields
    """

    name: str
    kind: TypeKind = "class"
    type_params: tuple[TypeParameter, ...] = ()
    base_types: tuple[TypeReference, ...] = ()
    is_public: bool = True
    members: tuple[Member, ...] = ()

    @property
    def is_enum(self) -> bool:
        return self.kind == "enum"

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface"
