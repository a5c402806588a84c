"""Pytest configuration and shared fixtures for blockflow tests."""

import pytest

from blockflow import DiagramGenerator, create_graph


@pytest.fixture
def chain_graph():
    """Linear chain 0 -> 1 -> 2 -> 3."""
    return create_graph([(0, 1), (1, 2), (2, 3)])


@pytest.fixture
def diamond_graph():
    """Diamond: 0 branches to 1 and 2, both join at 3."""
    return create_graph([(0, 1), (0, 2), (1, 3), (2, 3)])


@pytest.fixture
def back_edge_graph():
    """Two blocks jumping to each other."""
    return create_graph([(0, 1), (1, 0)])


@pytest.fixture
def self_loop_graph():
    """Single block looping on itself."""
    return create_graph([(0, 0)])


@pytest.fixture
def loop_graph():
    """Loop header with body, back edge and exit."""
    return create_graph(
        [(0, 1), (1, 2), (1, 3), (2, 1), (3, 4)],
        contents={
            0: ["_1 = const 0_i32", "goto"],
            1: ["_2 = Lt(copy _1, const 10_i32)", "switchInt(move _2)"],
            2: ["_1 = Add(copy _1, const 1_i32)", "goto"],
            3: ["_0 = copy _1", "goto"],
            4: ["return"],
        },
    )


@pytest.fixture
def program_text():
    """Two-function description in the text format."""
    return """
    fn main
    bb0:
        StorageLive(_1)
        _1 = const 5_i32
        -> switchInt(move _1)
    bb1:
        -> return
    bb2:
        StorageDead(_1)
        -> goto
    bb0 -> bb1 : 0
    bb0 -> bb2 : otherwise
    bb2 -> bb1

    fn helper
    start:
        _0 = const ()
        -> return
    """


@pytest.fixture
def generator():
    """Default DiagramGenerator instance."""
    return DiagramGenerator()
