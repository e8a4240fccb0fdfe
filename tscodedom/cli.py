"""tscodedom CLI: render serialized declaration trees as TypeScript."""

from __future__ import annotations

import json
import logging
import sys

from .backend.typescript import EmitError, TsEmitter
from .backend.util import INDENT_UNIT
from .diagnostics import Diagnostics
from .ir import TypeDeclaration
from .serialize import deserialize
from .skeleton import ApiDescription, HttpClientFunctionBuilder, build_client_class
from .typemap import TypeMapper


USAGE: str = """\
tscodedom [OPTIONS] [INPUT] [-o OUTPUT]

Render a JSON declaration tree (or, with --api, JSON API descriptions) as
TypeScript. Reads stdin when INPUT is omitted.

Options:
  --api               Input is a list of ApiDescription objects
  --client NAME       Client class name in --api mode (default: Client)
  --no-camel-case     Keep action names as-is in --api mode
  --strict            Fail on constructs that have no TypeScript rendering
  --indent N          Spaces per indentation level (default: 4)
  --verbose           Log progress to stderr
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


class Options:
    def __init__(self) -> None:
        self.api: bool = False
        self.client: str = "Client"
        self.camel_case: bool = True
        self.strict: bool = False
        self.indent_str: str = INDENT_UNIT
        self.verbose: bool = False
        self.input_file: str | None = None
        self.output_file: str | None = None


def parse_args(args: list[str]) -> tuple[Options | None, int]:
    """Parse arguments. Returns (options, exit_code); options is None to stop."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return (None, 0)
        elif arg in ("--client", "--indent", "-o", "--output"):
            if i + 1 >= len(args):
                print("tscodedom: " + arg + " requires an argument", file=sys.stderr)
                return (None, 2)
            value = args[i + 1]
            if arg == "--client":
                opts.client = value
            elif arg == "--indent":
                if not value.isdigit():
                    print("tscodedom: --indent expects a number", file=sys.stderr)
                    return (None, 2)
                opts.indent_str = " " * int(value)
            else:
                opts.output_file = value
            i += 2
        elif arg == "--api":
            opts.api = True
            i += 1
        elif arg == "--no-camel-case":
            opts.camel_case = False
            i += 1
        elif arg == "--strict":
            opts.strict = True
            i += 1
        elif arg == "--verbose":
            opts.verbose = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("tscodedom: unknown flag '" + arg + "'", file=sys.stderr)
            return (None, 2)
        elif opts.input_file is None:
            opts.input_file = arg
            i += 1
        else:
            print("tscodedom: unexpected argument '" + arg + "'", file=sys.stderr)
            return (None, 2)
    return (opts, 0)


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code)."""
    if input_file is None or input_file == "-":
        raw = sys.stdin.buffer.read()
        input_file = "<stdin>"
    else:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            print("tscodedom: " + input_file + ": No such file or directory", file=sys.stderr)
            return ("", 1)
        except OSError as e:
            print("tscodedom: " + input_file + ": " + str(e), file=sys.stderr)
            return ("", 1)
    try:
        return (raw.decode("utf-8"), 0)
    except ValueError:
        print("tscodedom: " + input_file + ": invalid utf-8", file=sys.stderr)
        return ("", 1)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is None:
        sys.stdout.write(output)
        return 0
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output)
    except OSError as e:
        print("tscodedom: cannot write '" + output_file + "': " + str(e), file=sys.stderr)
        return 1
    return 0


def _load_list(data: object, expected: type) -> list:
    nodes = deserialize(data)
    if not isinstance(nodes, tuple):
        nodes = (nodes,)
    for node in nodes:
        if not isinstance(node, expected):
            raise ValueError(f"expected {expected.__name__}, got {type(node).__name__}")
    return list(nodes)


def render(source: str, opts: Options) -> tuple[str, Diagnostics]:
    """Render JSON source per options. Raises ValueError or EmitError on bad input."""
    data = json.loads(source)
    mapper = TypeMapper()
    diagnostics = Diagnostics()
    if opts.api:
        descriptions = _load_list(data, ApiDescription)
        builder = HttpClientFunctionBuilder(mapper, camel_case=opts.camel_case)
        decls = [build_client_class(opts.client, descriptions, builder)]
        diagnostics.extend(builder.diagnostics)
    else:
        decls = _load_list(data, TypeDeclaration)
    emitter = TsEmitter(mapper, indent_str=opts.indent_str, strict=opts.strict)
    output = emitter.render_declarations(decls)
    diagnostics.extend(emitter.diagnostics)
    return (output, diagnostics)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    opts, code = parse_args(args)
    if opts is None:
        return code
    if opts.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    source, err = read_source(opts.input_file)
    if err != 0:
        return err
    if source.strip() == "":
        print("tscodedom: no input provided", file=sys.stderr)
        return 2
    try:
        output, diagnostics = render(source, opts)
    except json.JSONDecodeError as e:
        print("tscodedom: invalid JSON: " + str(e), file=sys.stderr)
        return 1
    except (ValueError, EmitError) as e:
        print("tscodedom: " + str(e), file=sys.stderr)
        return 1
    for d in diagnostics:
        print("tscodedom: " + str(d), file=sys.stderr)
    return write_output(output, opts.output_file)


if __name__ == "__main__":
    sys.exit(main())
