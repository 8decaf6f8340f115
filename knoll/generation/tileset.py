"""
Knoll hill tileset for Wave Function Collapse.

Five ASCII pieces draw a side-on landscape of rolling hills:

    ' '  open sky / flat ground
    '/'  rising slope (left flank of a hill)
    '\\'  falling slope (right flank of a hill)
    '_'  flat hilltop
    '#'  rock, the body of a hill

The rules keep slopes attached to rock, put hilltops on rock and keep sky
above the hills, so local choices add up to whole hill silhouettes:

       _
      /#\\
     /###\\   __
"""

from knoll.core.types import Direction
from .wfc import RuleTable


ALL_PIECES = " /\\_#"
HILL_PIECES = "/\\_#"

# Pieces allowed on each border of the map
TOP_EDGE = " _"
RIGHT_EDGE = " \\_#"
BOTTOM_EDGE = " /\\#"
LEFT_EDGE = " /_#"

# Higher weight = more common in output
HILL_WEIGHTS: dict[str, int] = {
    " ": 1000,
    "/": 10,
    "\\": 10,
    "_": 50,
    "#": 100,
}

# For each piece, the pieces allowed on each side of it
HILL_RULES: dict[str, dict[Direction, str]] = {
    " ": {
        Direction.TOP: " /\\#",
        Direction.RIGHT: " /_",
        Direction.BOTTOM: " /\\_",
        Direction.LEFT: " \\_",
    },
    "/": {
        Direction.TOP: " \\",
        Direction.RIGHT: "#\\",
        Direction.BOTTOM: " \\_#",
        Direction.LEFT: " _",
    },
    "\\": {
        Direction.TOP: " /",
        Direction.RIGHT: " _",
        Direction.BOTTOM: " /_#",
        Direction.LEFT: "/#",
    },
    "_": {
        Direction.TOP: " /\\#",
        Direction.RIGHT: " /_",
        Direction.BOTTOM: "#",
        Direction.LEFT: " \\_",
    },
    "#": {
        Direction.TOP: HILL_PIECES,
        Direction.RIGHT: "#\\",
        Direction.BOTTOM: " _#",
        Direction.LEFT: "/#",
    },
}


def create_hill_rule_table(with_edges: bool = True) -> RuleTable:
    """
    Create the hill rule table with all adjacency rules defined.

    Args:
        with_edges: Restrict border cells to the edge pieces. Without edges
                    every border cell starts with the whole alphabet.
    """
    edges = {
        Direction.TOP: TOP_EDGE,
        Direction.RIGHT: RIGHT_EDGE,
        Direction.BOTTOM: BOTTOM_EDGE,
        Direction.LEFT: LEFT_EDGE,
    }
    return RuleTable.from_strings(
        ALL_PIECES,
        HILL_RULES,
        HILL_WEIGHTS,
        edges if with_edges else None,
    )
