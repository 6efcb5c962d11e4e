"""MCP protocol surface for the Web3 analyst tools."""
