"""
SanMar MCP server: SanMar standard and PromoStandards SOAP services as MCP tools
"""

__version__ = "0.1.0"
