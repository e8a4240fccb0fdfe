"""Backend package - renders the declaration tree as TypeScript."""

from .typescript import EmitError, TsEmitter, UnsupportedNodeError, emit_typescript
