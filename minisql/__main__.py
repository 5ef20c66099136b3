#!/usr/bin/env python3
"""
MiniSQL - SQL parser shell
Entry point script

Run the REPL:
    python -m minisql

Or use as a library:
    from minisql import parse_sql
    stmt = parse_sql("SELECT * FROM users;")
"""

from minisql.core.repl import main

if __name__ == '__main__':
    main()
