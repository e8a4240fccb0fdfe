"""Type-name mapper: abstract TypeReference -> TypeScript type text.

The emitter asks two questions of the mapper and nothing else: what text a
type reference becomes, and whether it may appear in an `extends` clause.
Nullable types come back with a trailing "?" marker, which the emitter moves
onto field names (`name?: T`) or turns into `any` for return types.
"""

from __future__ import annotations

from .ir import TypeReference

NULLABLE_MARKER = "?"

# CLR and C# alias names with a direct TypeScript equivalent. Lookups try the
# name as given, then with a "System." prefix.
_BUILTINS: dict[str, str] = {
    "System.String": "string",
    "System.Char": "string",
    "System.Guid": "string",
    "System.Uri": "string",
    "System.Byte": "number",
    "System.SByte": "number",
    "System.Int16": "number",
    "System.Int32": "number",
    "System.Int64": "number",
    "System.UInt16": "number",
    "System.UInt32": "number",
    "System.UInt64": "number",
    "System.Single": "number",
    "System.Double": "number",
    "System.Decimal": "number",
    "System.Boolean": "boolean",
    "System.DateTime": "Date",
    "System.DateTimeOffset": "Date",
    "System.Object": "any",
    "System.Void": "void",
    "string": "string",
    "char": "string",
    "byte": "number",
    "sbyte": "number",
    "short": "number",
    "ushort": "number",
    "int": "number",
    "uint": "number",
    "long": "number",
    "ulong": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "bool": "boolean",
    "object": "any",
    "void": "void",
}

_SEQUENCES: frozenset[str] = frozenset(
    {
        "System.Array",
        "System.Collections.Generic.List",
        "System.Collections.Generic.IList",
        "System.Collections.Generic.IEnumerable",
        "System.Collections.Generic.ICollection",
        "System.Collections.Generic.IReadOnlyList",
        "System.Collections.Generic.IReadOnlyCollection",
        "System.Collections.ObjectModel.Collection",
        "System.Collections.ObjectModel.ObservableCollection",
    }
)

_DICTIONARIES: frozenset[str] = frozenset(
    {
        "System.Collections.Generic.Dictionary",
        "System.Collections.Generic.IDictionary",
        "System.Collections.Generic.IReadOnlyDictionary",
    }
)

_NULLABLES: frozenset[str] = frozenset({"System.Nullable"})

_TASKS: frozenset[str] = frozenset({"System.Threading.Tasks.Task"})

_NOT_DERIVABLE: frozenset[str] = frozenset(
    {"System.Object", "System.ValueType", "System.Enum", "object"}
)

_TS_PRIMITIVES: frozenset[str] = frozenset({"string", "number", "boolean", "any", "void"})


def _short_name(name: str) -> str:
    """Strip the namespace and any CLR generic arity suffix (`List`1`)."""
    short = name.rsplit(".", 1)[-1]
    tick = short.find("`")
    if tick >= 0:
        short = short[:tick]
    return short


def _in_family(name: str, family: frozenset[str]) -> bool:
    if name in family:
        return True
    short = _short_name(name)
    for full in family:
        if _short_name(full) == short:
            return True
    return False


class TypeMapper:
    """Map TypeReference descriptors to TypeScript type text.

    `extra` overrides or extends the builtin name table, e.g. to map a
    server-side namespace onto a client-side one.
    """

    def __init__(self, extra: dict[str, str] | None = None) -> None:
        self._names: dict[str, str] = dict(_BUILTINS)
        if extra:
            self._names.update(extra)

    def register(self, name: str, text: str) -> None:
        """Map `name` to `text` from now on."""
        self._names[name] = text

    def to_text(self, ref: TypeReference) -> str:
        text = self._base_text(ref)
        if ref.nullable and not text.endswith(NULLABLE_MARKER):
            text += NULLABLE_MARKER
        return text

    def is_valid_for_derivation(self, ref: TypeReference) -> bool:
        if ref.nullable:
            return False
        if ref.name in _NOT_DERIVABLE or ("System." + ref.name) in _NOT_DERIVABLE:
            return False
        text = self.to_text(ref)
        if text.endswith(NULLABLE_MARKER):
            return False
        return text not in _TS_PRIMITIVES

    def _base_text(self, ref: TypeReference) -> str:
        name = ref.name
        args = ref.args
        if name in self._names:
            mapped = self._names[name]
        elif ("System." + name) in self._names:
            mapped = self._names["System." + name]
        else:
            mapped = None
        if mapped is not None and not args:
            return mapped
        if name.endswith("[]"):
            element = TypeReference(name[:-2], args=args)
            return "Array<" + self.to_text(element) + ">"
        if len(args) == 1 and _in_family(name, _NULLABLES):
            inner = self.to_text(args[0])
            if inner.endswith(NULLABLE_MARKER):
                return inner
            return inner + NULLABLE_MARKER
        if _in_family(name, _TASKS):
            if len(args) == 0:
                return "void"
            return self.to_text(args[0])
        if len(args) == 1 and _in_family(name, _SEQUENCES):
            return "Array<" + self.to_text(args[0]) + ">"
        if len(args) == 2 and _in_family(name, _DICTIONARIES):
            return "{[id: " + self.to_text(args[0]) + "]: " + self.to_text(args[1]) + "}"
        base = mapped if mapped is not None else _short_generic(name)
        if not args:
            return base
        return base + "<" + ", ".join(self.to_text(a) for a in args) + ">"


def _short_generic(name: str) -> str:
    """Drop a CLR arity suffix but keep the namespace: `Ns.Pair`2` -> `Ns.Pair`."""
    tick = name.find("`")
    if tick >= 0:
        return name[:tick]
    return name
