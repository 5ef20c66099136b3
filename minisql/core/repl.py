"""
REPL - Interactive SQL parser shell for MiniSQL

Reads SQL line by line, accumulates multi-line statements until a
semicolon is seen, and prints the parsed syntax tree or the error.
"""

import json
import logging
import sys
from typing import List, Optional, TextIO

from ..parser.errors import ParseError
from ..parser.lexer import Lexer, TokenType
from ..parser.parser import DEFAULT_MAX_DEPTH, parse_sql

logger = logging.getLogger(__name__)


def precheck(sql: str) -> Optional[str]:
    """
    Coarse validation run before parsing.

    Returns an error message, or None if the statement may be parsed.
    The parser performs its own checks regardless.
    """
    if not sql.strip():
        return "Empty query"

    lowered = sql.lower()
    if lowered.startswith("select"):
        if "from" not in lowered:
            return "SELECT statement must contain FROM clause"
    elif lowered.startswith("create table"):
        if "varchar" in lowered and "varchar(" not in lowered:
            return "VARCHAR type must specify length using VARCHAR(n)"

    return None


def format_statement(stmt) -> str:
    """Render a statement tree as indented JSON"""
    return json.dumps(stmt.to_dict(), indent=2)


class REPL:
    """
    Interactive SQL REPL (Read-Eval-Print Loop) for MiniSQL.

    Features:
    - Multi-line SQL input (statements ending with ;)
    - Two consecutive blank lines force-parse an unfinished statement
    - Special commands (.help, .tokens, .quit)
    - Syntax trees printed as JSON
    """

    BANNER = """
MiniSQL - SQL parser shell

Enter SQL queries (each ending with a semicolon) or type 'exit' to quit.
For multi-line queries, press Enter after each line.
Press Enter twice to force-parse an incomplete query.
Type .help for commands.
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .tokens <sql>     Show the token stream for a piece of SQL
  .quit / .exit     Exit the REPL

SQL Statements:
  SELECT            Columns, FROM table, optional WHERE and ORDER BY
  CREATE TABLE      Columns of type INT, BOOL or VARCHAR(n) with
                    PRIMARY KEY, NOT NULL and CHECK (...) constraints

Example:
  CREATE TABLE users (
    id INT PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    age INT CHECK (age >= 0)
  );

  SELECT name, age FROM users WHERE age > 18 ORDER BY age DESC;
"""

    def __init__(self, out: TextIO = None, max_depth: int = DEFAULT_MAX_DEPTH):
        self.out = out if out is not None else sys.stdout
        self.max_depth = max_depth
        self.running = False
        self.buffer: List[str] = []
        self.empty_lines = 0
        self.errors = 0

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        self._print(self.BANNER)

        while self.running:
            try:
                self.feed_line(input(self._get_prompt()))
            except KeyboardInterrupt:
                self._print("\n(Use .quit to exit)")
            except EOFError:
                self._print()
                self._quit()

    def _get_prompt(self) -> str:
        """Get the appropriate prompt."""
        if self.buffer:
            return "   ...> "
        return "minisql> "

    def feed_line(self, line: str) -> None:
        """Process one line of input."""
        line = line.strip()

        if not self.buffer and line.lower() == 'exit':
            self._quit()
            return

        # Empty line
        if not line:
            self.empty_lines += 1
            if self.empty_lines >= 2 and self.buffer:
                self.flush()
            return
        self.empty_lines = 0

        # Special commands (only when not in multi-line mode)
        if not self.buffer and line.startswith('.'):
            self._handle_command(line)
            return

        # Add to buffer
        self.buffer.append(line)

        # Check if statement is complete
        if ';' in line:
            self.execute(' '.join(self.buffer))
            self.buffer = []

    def flush(self) -> None:
        """Force-parse whatever is buffered, complete or not."""
        if not self.buffer:
            return

        query = ' '.join(self.buffer)
        self.buffer = []
        self.empty_lines = 0

        logger.debug("Force-parsing incomplete query %r", query)
        self._print("Parsing incomplete query...")
        self.execute(query, forced=True)

    def _handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        parts = cmd.split(None, 1)
        command = parts[0].lower()
        args = parts[1] if len(parts) > 1 else None

        if command in ('.quit', '.exit', '.q'):
            self._quit()
        elif command == '.help':
            self._print(self.HELP)
        elif command == '.tokens':
            self._show_tokens(args)
        else:
            self._print(f"Unknown command: {command}")
            self._print("Type .help for available commands.")

    def _quit(self) -> None:
        """Exit the REPL."""
        self._print("Goodbye!")
        self.running = False

    def _show_tokens(self, sql: Optional[str]) -> None:
        """Print the token stream for a piece of SQL."""
        if not sql:
            self._print("Usage: .tokens <sql>")
            return

        try:
            tokens = Lexer(sql).tokenize()
        except ParseError as e:
            self.errors += 1
            self._print(f"Error: {e}")
            return

        for token in tokens:
            value = token.value.name if token.type == TokenType.KEYWORD else token.value
            value_str = '' if value is None else repr(value)
            self._print(f"  {token.type.name:15} {value_str:20} (line {token.line}, column {token.column})")

    def execute(self, query: str, forced: bool = False) -> bool:
        """Parse a statement and display the tree or the error."""
        error = precheck(query)
        if error is None:
            try:
                stmt = parse_sql(query, max_depth=self.max_depth)
            except ParseError as e:
                error = str(e)

        if error is None:
            self._print(format_statement(stmt))
            self._print()
            return True

        self.errors += 1
        if forced and ';' not in query:
            self._print("Error: Missing semicolon at the end of the query")
        self._print(f"Error: {error}")
        self._print(f"Current query: {query}")
        self._print()
        return False


def main(argv: Optional[List[str]] = None):
    """Entry point for the REPL."""
    import argparse

    parser = argparse.ArgumentParser(
        description="MiniSQL - Parse SELECT and CREATE TABLE statements into syntax trees"
    )
    parser.add_argument(
        '-e', '--execute',
        help='Parse a single SQL statement and exit'
    )
    parser.add_argument(
        '-f', '--file',
        help='Parse the SQL statements in a file and exit'
    )
    parser.add_argument(
        '--max-depth',
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f'Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH})'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Parse single statement
    if args.execute is not None:
        error = precheck(args.execute)
        if error is None:
            try:
                stmt = parse_sql(args.execute, max_depth=args.max_depth)
            except ParseError as e:
                error = str(e)
        if error is not None:
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)
        print(format_statement(stmt))
        return

    # Parse from file
    if args.file:
        repl = REPL(max_depth=args.max_depth)
        repl.running = True
        with open(args.file, 'r') as f:
            for line in f:
                repl.feed_line(line)
                if not repl.running:
                    break
        repl.flush()
        if repl.errors:
            sys.exit(1)
        return

    # Start interactive REPL
    repl = REPL(max_depth=args.max_depth)
    repl.run()


if __name__ == '__main__':
    main()
