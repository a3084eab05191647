"""Core library for dappforge (composition engine, plugins, configuration)."""
