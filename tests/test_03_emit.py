"""Data-driven emitter tests.

Test cases live in 03_emit/*.tests files. Format:

    === test name
    {"_type": "TypeDeclaration", "name": "Foo"}
    ---
    export class Foo {
    }
    ---

The input section is a JSON declaration (or list of declarations) in the
`serialize` format; the expected section is the exact TypeScript output,
compared after stripping leading and trailing blank space.
"""

import json
from pathlib import Path

import pytest

from tscodedom.backend.typescript import TsEmitter
from tscodedom.serialize import deserialize

EMIT_DIR = Path(__file__).parent / "03_emit"


def parse_emit_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_emit_tests() -> list[tuple[str, str, str]]:
    """Find all emit tests, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(EMIT_DIR.glob("*.tests")):
        for name, source, expected in parse_emit_file(test_file):
            results.append((f"{test_file.stem}/{name}", source, expected))
    return results


def pytest_generate_tests(metafunc):
    """Parametrize tests over emit test files."""
    if "emit_input" in metafunc.fixturenames:
        params = [
            pytest.param(source, expected, id=test_id)
            for test_id, source, expected in discover_emit_tests()
        ]
        metafunc.parametrize("emit_input,emit_expected", params)


def test_emit(emit_input: str, emit_expected: str):
    """Verify a declaration tree renders to the expected TypeScript."""
    nodes = deserialize(json.loads(emit_input))
    if not isinstance(nodes, tuple):
        nodes = (nodes,)
    emitter = TsEmitter()
    output = emitter.render_declarations(nodes)
    assert output.strip() == emit_expected
    assert not emitter.diagnostics.errors()
