"""
Expense Tracker MCP - personal-finance statistics over the Model Context Protocol.
"""

__version__ = "0.1.0"
