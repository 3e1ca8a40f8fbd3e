"""
Agent-G
=======

A GitHub App that runs tool-using language model agents on repository
events: it labels new issues, reviews new pull requests and keeps the
README in step with the code.
"""

__version__ = "1.0.0"
