"""tscodedom: render language-agnostic declaration trees as TypeScript."""

from __future__ import annotations

from .backend.typescript import EmitError, TsEmitter, UnsupportedNodeError, emit_typescript
from .diagnostics import Diagnostic, Diagnostics
from .serialize import deserialize, serialize
from .skeleton import (
    ApiDescription,
    ApiParameter,
    FunctionBuilder,
    HttpClientFunctionBuilder,
    build_client_class,
)
from .typemap import TypeMapper
