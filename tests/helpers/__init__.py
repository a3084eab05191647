"""Test helpers for the dappforge suite."""
