#!/usr/bin/env python3
"""
Demo Web Application - SQL Parser Service

A small JSON API that exposes MiniSQL's parser over HTTP.

Endpoints:
- GET  /         Usage information
- POST /parse    Parse one statement, returns the syntax tree
- GET  /tokens   Token stream for ?sql=... (POST with a body also works)

Run:
    pip install flask
    python app.py

Then:
    curl -X POST localhost:5000/parse -H 'Content-Type: application/json' \\
         -d '{"sql": "SELECT * FROM users;"}'
"""

import logging
import os
import sys
from flask import Flask, request, jsonify

# Add parent directory to path to import minisql
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minisql.parser import DEFAULT_MAX_DEPTH, Lexer, ParseError, TokenType, parse_sql

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['MAX_DEPTH'] = int(os.environ.get('MINISQL_MAX_DEPTH', DEFAULT_MAX_DEPTH))


def _request_sql():
    """Read the SQL text from a JSON body, form field, or query string."""
    data = request.get_json(silent=True)
    if isinstance(data, dict) and 'sql' in data:
        return data['sql']
    if 'sql' in request.form:
        return request.form['sql']
    return request.args.get('sql')


def _missing_sql():
    return jsonify({'error': {'kind': 'request', 'message': "Missing 'sql' parameter"}}), 400


@app.route('/')
def index():
    """Usage information."""
    return jsonify({
        'service': 'minisql',
        'endpoints': {
            'POST /parse': "Parse {'sql': ...} into a syntax tree",
            'GET /tokens': 'Token stream for ?sql=...',
        },
        'max_depth': app.config['MAX_DEPTH'],
    })


@app.route('/parse', methods=['POST'])
def parse():
    """Parse one statement."""
    sql = _request_sql()
    if not isinstance(sql, str):
        return _missing_sql()

    try:
        stmt = parse_sql(sql, max_depth=app.config['MAX_DEPTH'])
    except ParseError as e:
        logger.info("Rejected statement: %s", e)
        return jsonify({'error': e.to_dict(), 'sql': sql}), 400

    return jsonify({'statement': stmt.to_dict()})


@app.route('/tokens', methods=['GET', 'POST'])
def tokens():
    """Tokenize a piece of SQL."""
    sql = _request_sql()
    if not isinstance(sql, str):
        return _missing_sql()

    try:
        token_list = Lexer(sql).tokenize()
    except ParseError as e:
        return jsonify({'error': e.to_dict(), 'sql': sql}), 400

    return jsonify({'tokens': [
        {
            'type': token.type.name,
            'value': token.value.name if token.type == TokenType.KEYWORD else token.value,
            'line': token.line,
            'column': token.column,
        }
        for token in token_list
    ]})


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
