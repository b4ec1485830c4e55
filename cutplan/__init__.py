"""Workshop Cut Planner - BOM nesting and budgeting for furniture workshops."""

__version__ = "0.1.0"
