"""
InDesign Bridge – CLI Management Tool.

Commands:
  serve                              Start MCP server (stdio)
  list                               List operations by group
  describe <op>                      Print an operation's JSON Schema
  render <op> [--params JSON]        Print the ExtendScript payload (no InDesign)
         [--guarded]                 ... wrapped in the error guard
  run <op> [--params JSON]           Run an operation in InDesign
  check                              Show transport and open documents
"""

import argparse
import json
import sys

import indesign_bridge
import operations
import outcome
from dispatcher import Dispatcher, DispatchError, OperationRequest


def _load_params(text: str | None) -> dict | None:
    """Parse --params JSON; print an error and return None when invalid."""
    if not text:
        return {}
    try:
        params = json.loads(text)
    except json.JSONDecodeError as e:
        print(f"Error: --params is not valid JSON: {e}")
        return None
    if not isinstance(params, dict):
        print("Error: --params must be a JSON object")
        return None
    return params


def cmd_serve(args):
    """Start the MCP server."""
    print("Starting InDesign Bridge MCP Server ...", file=sys.stderr)
    import exec_server
    exec_server.main()
    return 0


def cmd_list(args):
    """List the catalog grouped by area."""
    current = None
    for op in operations.CATALOG:
        if op.group != current:
            if current is not None:
                print()
            current = op.group
            print(f"{current}:")
        flags = []
        if op.undoable:
            flags.append("undo")
        if op.long_running:
            flags.append("long")
        suffix = f"  [{', '.join(flags)}]" if flags else ""
        print(f"  {op.name:<26} {op.label}{suffix}")
    print(f"\n{len(operations.CATALOG)} operations")
    return 0


def cmd_describe(args):
    """Print an operation's description and JSON Schema."""
    op = operations.get(args.operation)
    if op is None:
        print(f"Error: Unknown tool: {args.operation}")
        return 1
    print(f"{op.name} ({op.label})")
    print(op.description)
    print()
    print(json.dumps(op.input_schema(), indent=2))
    return 0


def cmd_render(args):
    """Validate parameters and print the payload without touching InDesign."""
    params = _load_params(args.params)
    if params is None:
        return 1
    try:
        _, payload = Dispatcher().prepare(OperationRequest(args.operation, params))
    except DispatchError as e:
        print(f"Error: {e}")
        return 1
    print(outcome.guard(payload) if args.guarded else payload)
    return 0


def cmd_run(args):
    """Run an operation through the dispatcher."""
    params = _load_params(args.params)
    if params is None:
        return 1
    try:
        print(Dispatcher().invoke(args.operation, params))
    except DispatchError as e:
        print(f"Error: {e}")
        return 1
    return 0


def cmd_check(args):
    """Report the selected transport and whether InDesign answers."""
    transport = indesign_bridge.default_transport()
    sep = "=" * 55
    print(sep)
    print("  InDesign Bridge Check")
    print(sep)
    print(f"  Transport:      {transport.name}")
    print(f"  Timeout:        {indesign_bridge.DEFAULT_TIMEOUT:g}s (long: {indesign_bridge.LONG_TIMEOUT:g}s)")
    if transport.name == "osascript":
        print(f"  Application:    {indesign_bridge.APP_NAME}")
    print(f"  Scratch dir:    {transport.scratch_dir or '(system temp)'}")

    result = indesign_bridge.run(
        'app.name + " " + app.version + "|" + app.documents.length',
        transport=transport,
    )
    if not isinstance(result, outcome.Success):
        print(f"  Status:         unreachable ({result.describe()})")
        print(sep)
        return 1
    version, _, documents = result.text.partition("|")
    print(f"  InDesign:       {version}")
    print(f"  Open documents: {documents}")
    print(sep)
    return 0


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="InDesign Bridge – Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  serve                          Start MCP server
  list                           List operations
  describe <op>                  Show an operation's JSON Schema
  render <op> [--params JSON]    Print the ExtendScript payload
  run <op> [--params JSON]       Run an operation in InDesign
  check                          Show transport and InDesign status
        """,
    )
    parser.add_argument("--log-level", help="Logging level (default: $INDESIGN_LOG_LEVEL or WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve
    subparsers.add_parser("serve", help="Start MCP server")

    # list
    subparsers.add_parser("list", help="List operations")

    # describe
    p_describe = subparsers.add_parser("describe", help="Show an operation's JSON Schema")
    p_describe.add_argument("operation", help="Operation name")

    # render
    p_render = subparsers.add_parser("render", help="Print the ExtendScript payload for an operation")
    p_render.add_argument("operation", help="Operation name")
    p_render.add_argument("--params", help="Parameters as a JSON object")
    p_render.add_argument("--guarded", action="store_true", help="Include the error guard wrapper")

    # run
    p_run = subparsers.add_parser("run", help="Run an operation in InDesign")
    p_run.add_argument("operation", help="Operation name")
    p_run.add_argument("--params", help="Parameters as a JSON object")

    # check
    subparsers.add_parser("check", help="Show transport and InDesign status")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    from exec_server import configure_logging
    configure_logging(args.log_level)

    commands = {
        "serve": cmd_serve,
        "list": cmd_list,
        "describe": cmd_describe,
        "render": cmd_render,
        "run": cmd_run,
        "check": cmd_check,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
