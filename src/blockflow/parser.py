"""
Parser module for control-flow graph descriptions.

Handles parsing of a small text format into GraphModel objects:

    fn main
    bb0:
        StorageLive(_1)
        _1 = const 5_i32
        -> switchInt(move _1)
    bb1:
        -> return
    bb0 -> bb1 : 0
    bb0 -> bb2 : otherwise
    entry bb0

``fn NAME`` starts a function (optional when there is only one), ``NAME:``
starts a block, indented lines are its statements and an indented line
starting with ``->`` is its terminator. ``A -> B`` adds an edge, optionally
labelled with ``: label``. ``entry NAME`` sets the entry block, which defaults
to the first block declared or mentioned.
"""

import re
import textwrap
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .graph import (
    Edge,
    GraphModel,
    Node,
    Program,
    block_lines,
    default_statement_filter,
)

DEFAULT_FUNCTION = "main"


class ParseError(Exception):
    """Raised when input parsing fails."""

    pass


@dataclass
class _Block:
    name: str
    statements: List[str] = field(default_factory=list)
    terminator: Optional[str] = None


@dataclass
class _Function:
    name: str
    blocks: Dict[str, _Block] = field(default_factory=dict)
    edges: List[Tuple[str, str, Optional[str]]] = field(default_factory=list)
    entry: Optional[str] = None

    def block(self, name: str) -> _Block:
        if name not in self.blocks:
            self.blocks[name] = _Block(name)
        return self.blocks[name]


class Parser:
    """Parses CFG description text into a Program."""

    FUNCTION_PATTERN = re.compile(r"^fn\s+(\S+)\s*$")
    ENTRY_PATTERN = re.compile(r"^entry\s+(\S+)\s*$")
    # Block names never contain whitespace, colons or an arrow.
    NAME = r"(?:(?!->)[^\s:])+"
    BLOCK_PATTERN = re.compile(rf"^({NAME})\s*:\s*$")
    EDGE_PATTERN = re.compile(rf"^({NAME})\s*->\s*({NAME})\s*(?::\s*(.*?))?\s*$")

    def __init__(
        self, statement_filter: Callable[[str], bool] = default_statement_filter
    ):
        self.statement_filter = statement_filter

    def parse(self, input_text: str) -> Program:
        """
        Parse input text and return a Program.

        Args:
            input_text: Multi-line description of one or more functions

        Returns:
            Program with one GraphModel per function

        Raises:
            ParseError: If input format is invalid
        """
        lines = textwrap.dedent(input_text).strip("\n").split("\n")
        functions: List[_Function] = []
        current: Optional[_Function] = None
        block: Optional[_Block] = None

        for line_num, line in enumerate(lines, 1):
            stripped = line.strip()

            # Skip empty lines and comments
            if not stripped or stripped.startswith("#"):
                continue

            if line[0].isspace():
                if block is None:
                    raise ParseError(
                        f"Line {line_num}: Statement outside of a block: {stripped}"
                    )
                if stripped.startswith("->"):
                    if block.terminator is not None:
                        raise ParseError(
                            f"Line {line_num}: Block '{block.name}' already has "
                            f"a terminator"
                        )
                    block.terminator = stripped[2:].strip()
                else:
                    block.statements.append(stripped)
                continue

            block = None

            match = self.FUNCTION_PATTERN.match(stripped)
            if match:
                name = match.group(1)
                if any(f.name == name for f in functions):
                    raise ParseError(f"Line {line_num}: Duplicate function '{name}'")
                current = _Function(name)
                functions.append(current)
                continue

            if current is None:
                current = _Function(DEFAULT_FUNCTION)
                functions.append(current)

            match = self.ENTRY_PATTERN.match(stripped)
            if match:
                if current.entry is not None:
                    raise ParseError(
                        f"Line {line_num}: Entry already set for '{current.name}'"
                    )
                current.entry = match.group(1)
                continue

            match = self.BLOCK_PATTERN.match(stripped)
            if match:
                name = match.group(1)
                existing = current.blocks.get(name)
                if existing is not None and (
                    existing.statements or existing.terminator is not None
                ):
                    raise ParseError(f"Line {line_num}: Duplicate block '{name}'")
                block = current.block(name)
                continue

            match = self.EDGE_PATTERN.match(stripped)
            if match:
                source, target, label = match.groups()
                current.block(source)
                current.block(target)
                current.edges.append((source, target, label or None))
                continue

            if "->" in stripped:
                raise ParseError(
                    f"Line {line_num}: Invalid connection format: {stripped}"
                )
            raise ParseError(f"Line {line_num}: Unrecognised line: {stripped}")

        if not functions:
            raise ParseError("No blocks found in input")

        program = Program()
        for function in functions:
            program.add(function.name, self._build(function))
        return program

    def _build(self, function: _Function) -> GraphModel:
        """Turn a parsed function into a GraphModel."""
        if not function.blocks:
            raise ParseError(f"Function '{function.name}' has no blocks")

        entry = function.entry
        if entry is None:
            entry = next(iter(function.blocks))
        elif entry not in function.blocks:
            raise ParseError(
                f"Function '{function.name}': unknown entry block '{entry}'"
            )

        nodes = tuple(
            Node(
                block.name,
                block.name,
                block_lines(block.statements, block.terminator, self.statement_filter),
            )
            for block in function.blocks.values()
        )
        edges = tuple(Edge(s, t, label) for s, t, label in function.edges)
        return GraphModel(nodes=nodes, edges=edges, entry=entry)


def parse_program(
    input_text: str,
    statement_filter: Callable[[str], bool] = default_statement_filter,
) -> Program:
    """
    Convenience function to parse a multi-function description.

    Args:
        input_text: Multi-line description text
        statement_filter: Predicate selecting the statements to display

    Returns:
        Program with one GraphModel per function
    """
    return Parser(statement_filter).parse(input_text)


def parse_graph(
    input_text: str,
    statement_filter: Callable[[str], bool] = default_statement_filter,
) -> GraphModel:
    """
    Convenience function to parse a single-function description.

    Raises:
        ParseError: If the input describes more than one function
    """
    program = parse_program(input_text, statement_filter)
    if len(program) != 1:
        raise ParseError(
            f"Expected a single function, found {len(program)}: "
            f"{', '.join(program.names())}"
        )
    return next(iter(program))[1]
