"""
Jarvis - natural-language assistant for family finance and calendar.

Turns free text or a photo into one of five structured actions
(transaction, event, task, delete_event, update_event) and executes it
against the configured finance and calendar backends.
"""

__version__ = "0.1.0"
