"""
LYC Back End Command-Line Interface
===================================

- **lycgen**: RPN program to assembly, listing and symbol table

The tool is a Click-based CLI application.
"""

__all__ = ["lycgen"]
