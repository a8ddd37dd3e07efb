#!/usr/bin/env python
"""
Command-line interface for mdcraft
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path to import mdcraft
sys.path.insert(0, str(Path(__file__).parent.parent))

from mdcraft.version_info import __version__, __build_timestamp__, __build_type__

logger = logging.getLogger(__name__)


def print_version():
    """Print version information."""
    print(f"mdcraft v{__version__}")
    print(f"Build: {__build_timestamp__}")
    print(f"Build Type: {__build_type__}")


def read_text(path: str) -> str:
    """Read a markdown file, '-' meaning stdin."""
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def read_json(path):
    if path is None:
        return None
    return json.loads(read_text(path))


def write_output(text: str, output=None):
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"Wrote {len(text)} chars to {output}")
    else:
        sys.stdout.write(text if text.endswith('\n') else text + '\n')


def cmd_render(args, config):
    from mdcraft.core.preview import render_document, render_standalone

    md_text = read_text(args.file)
    experimental = args.experimental or config['enable_experimental']
    if args.standalone:
        title = Path(args.file).stem if args.file != '-' else 'Preview'
        html_output = render_standalone(md_text, title=title, enable_experimental=experimental)
    else:
        html_output = render_document(md_text, enable_experimental=experimental)
    write_output(html_output, args.output)


def cmd_toc(args, config):
    from mdcraft.generators.toc import generate_toc

    align_center = config['toc_align_center'] and not args.no_center
    toc = generate_toc(read_text(args.file), align_center=align_center)
    if not toc:
        logger.warning("No headings found")
        return
    write_output(toc, args.output)


def parse_selection(value: str):
    """'START:END' or a caret offset 'POS'."""
    start, _, end = value.partition(':')
    try:
        return int(start), int(end) if end else None
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid selection '{value}', expected START:END") from None


def cmd_edit(args, config):
    from mdcraft.session import EditorSession

    session = EditorSession.from_config(config, read_text(args.file))
    if args.select:
        session.select(*args.select)
    else:
        session.select(0, len(session.text))
    op_args = list(args.op_args)
    if args.operation == 'heading':
        op_args = [int(level) for level in op_args]
    result = session.apply(args.operation, *op_args)
    logger.debug(f"Edit {args.operation}: selection now {result.selection}")
    write_output(session.text, args.output)


def cmd_table(args, config):
    from mdcraft.generators.table import generate_table

    write_output(generate_table(args.rows, args.cols, args.headers), args.output)


def cmd_badge(args, config):
    from mdcraft.generators.badge import PRESET_BADGES, BadgeSpec, badge_markdown

    if args.preset:
        spec = PRESET_BADGES[args.preset]
    elif args.label and args.message:
        spec = BadgeSpec(args.label, args.message, args.color, args.logo, args.style)
    else:
        raise ValueError("Either --preset or both --label and --message are required")
    write_output(badge_markdown(spec, linked=not args.no_link, link_url=args.link), args.output)


def cmd_tree(args, config):
    from mdcraft.generators.folder_tree import DEFAULT_FOLDER_STRUCTURE, generate_folder_structure, render_tree, tree_from_json

    data = read_json(args.config_file)
    nodes = tree_from_json(data) if data is not None else DEFAULT_FOLDER_STRUCTURE
    output = render_tree(nodes) if args.bare else generate_folder_structure(nodes)
    write_output(output, args.output)


def cmd_diagram(args, config):
    from dataclasses import replace
    from mdcraft.generators.diagram import DEFAULT_DIAGRAM, DiagramConfig, generate_diagram

    data = read_json(args.config_file)
    diagram = DiagramConfig.from_dict(data) if data is not None else DEFAULT_DIAGRAM
    if args.preset:
        diagram = diagram.load_preset(args.preset)
    overrides = {k: v for k, v in (('kind', args.kind), ('direction', args.direction), ('theme', args.theme)) if v}
    if overrides:
        diagram = replace(diagram, **overrides)
    write_output(generate_diagram(diagram), args.output)


def cmd_stub(args, config):
    from mdcraft.generators.code import generate_function_stub

    params = []
    for spec in args.param or []:
        name, _, type_ = spec.partition(':')
        params.append((name, type_ or 'string'))
    write_output(generate_function_stub(args.language, args.name, params, args.returns, args.body or ''), args.output)


def build_parser() -> argparse.ArgumentParser:
    from mdcraft.core.editing import EDIT_OPERATIONS
    from mdcraft.generators.badge import BADGE_STYLES, DEFAULT_STYLE, PRESET_BADGES
    from mdcraft.generators.code import SUPPORTED_LANGUAGES
    from mdcraft.generators.diagram import DIAGRAM_KINDS, DIRECTIONS, PRESET_TEMPLATES, THEMES

    parser = argparse.ArgumentParser(
        prog='mdcraft',
        description=f'mdcraft v{__version__}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mdcraft render README.md -o preview.html --standalone
  mdcraft toc README.md --no-center
  mdcraft edit notes.md bold --select 5:9
  mdcraft edit notes.md heading 2
  mdcraft table --rows 3 --cols 2 --headers Name Value
  mdcraft badge --preset python
  mdcraft tree structure.json
  mdcraft diagram --preset user_journey --theme dark
        """
    )

    parser.add_argument(
        '--version', '-v',
        action='store_true',
        help='Show version information'
    )
    parser.add_argument(
        '--debug', '-d',
        action='store_true',
        help='Verbose logging and tracebacks on errors'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a JSON config file (default: ~/.mdcraft/config.json)'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        default=None,
        help='Also write rotating logs to this directory'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    render_parser = subparsers.add_parser('render', help='Render markdown to preview HTML')
    render_parser.add_argument('file', help="Markdown file ('-' for stdin)")
    render_parser.add_argument('--standalone', action='store_true', help='Emit a full HTML page')
    render_parser.add_argument('--experimental', action='store_true', help='Enable experimental pipeline steps')
    render_parser.set_defaults(handler=cmd_render)

    toc_parser = subparsers.add_parser('toc', help='Generate a table of contents')
    toc_parser.add_argument('file', help="Markdown file ('-' for stdin)")
    toc_parser.add_argument('--no-center', action='store_true', help='Do not wrap in a centered block')
    toc_parser.set_defaults(handler=cmd_toc)

    edit_parser = subparsers.add_parser('edit', help='Apply an editing operation to a file')
    edit_parser.add_argument('file', help="Markdown file ('-' for stdin)")
    edit_parser.add_argument('operation', choices=sorted(EDIT_OPERATIONS))
    edit_parser.add_argument('op_args', nargs='*', help='Operation arguments (heading level, inserted text, snippet name)')
    edit_parser.add_argument('--select', type=parse_selection, metavar='START:END',
                             help='Selection to edit (default: the whole file)')
    edit_parser.set_defaults(handler=cmd_edit)

    table_parser = subparsers.add_parser('table', help='Generate a table skeleton')
    table_parser.add_argument('--rows', type=int, default=3, help='Rows including the header (default: 3)')
    table_parser.add_argument('--cols', type=int, default=3, help='Columns (default: 3)')
    table_parser.add_argument('--headers', nargs='*', default=[], help='Header names')
    table_parser.set_defaults(handler=cmd_table)

    badge_parser = subparsers.add_parser('badge', help='Generate a shields.io badge')
    badge_parser.add_argument('--preset', choices=sorted(PRESET_BADGES), help='Predefined badge')
    badge_parser.add_argument('--label')
    badge_parser.add_argument('--message')
    badge_parser.add_argument('--color', default='007ACC')
    badge_parser.add_argument('--logo')
    badge_parser.add_argument('--style', choices=BADGE_STYLES, default=DEFAULT_STYLE)
    badge_parser.add_argument('--link', help='Link target (default: the badge image)')
    badge_parser.add_argument('--no-link', action='store_true', help='Plain image without a link')
    badge_parser.set_defaults(handler=cmd_badge)

    tree_parser = subparsers.add_parser('tree', help='Generate a folder structure tree')
    tree_parser.add_argument('config_file', nargs='?', help='JSON list of nodes (default: sample project)')
    tree_parser.add_argument('--bare', action='store_true', help='Only the tree, no heading or fence')
    tree_parser.set_defaults(handler=cmd_tree)

    diagram_parser = subparsers.add_parser('diagram', help='Generate a mermaid diagram')
    diagram_parser.add_argument('config_file', nargs='?', help='JSON diagram config (default: sample flowchart)')
    diagram_parser.add_argument('--kind', choices=DIAGRAM_KINDS)
    diagram_parser.add_argument('--direction', choices=DIRECTIONS)
    diagram_parser.add_argument('--theme', choices=THEMES)
    diagram_parser.add_argument('--preset', choices=sorted(PRESET_TEMPLATES))
    diagram_parser.set_defaults(handler=cmd_diagram)

    stub_parser = subparsers.add_parser('stub', help='Generate a function stub')
    stub_parser.add_argument('language', choices=SUPPORTED_LANGUAGES)
    stub_parser.add_argument('name')
    stub_parser.add_argument('--param', action='append', help='Parameter as name:type (repeatable)')
    stub_parser.add_argument('--returns', default='void', help='Return type (default: void)')
    stub_parser.add_argument('--body', help='Function body')
    stub_parser.set_defaults(handler=cmd_stub)

    for sub in (render_parser, toc_parser, edit_parser, table_parser, badge_parser, tree_parser, diagram_parser, stub_parser):
        sub.add_argument('--output', '-o', help='Write to this file instead of stdout')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    from mdcraft.config import load_config
    from mdcraft.core.logging_config import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print_version()
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    config = load_config(args.config)
    debug = args.debug or config['debug']
    log_dir = args.log_dir or config['log_dir']
    setup_logging(Path(log_dir) if log_dir else None, debug_mode=debug)

    try:
        args.handler(args, config)
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        if debug:
            import traceback
            traceback.print_exc()
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
