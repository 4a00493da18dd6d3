"""taskgate -- HTTP remote control for editor-hosted agent tasks.

This package lets an external caller start and continue a long-lived
agent task running inside an editor, without knowing the editor's
internal task identifiers up front. Callers may attach their own alias
(``customId``) to a task when creating it and address the task by that
alias afterwards.
"""

__version__ = "0.1.0"
