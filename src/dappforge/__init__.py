"""
dappforge - blueprint-driven code generation for Web3 applications

dappforge turns a visual blueprint of plugin nodes into a single generated
project tree, routing every plugin's files to their final location and merging
files that several plugins contribute.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
