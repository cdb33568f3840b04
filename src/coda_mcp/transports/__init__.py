# Coda MCP Server
# File: transports/__init__.py
# Version: v1

"""Transports: multi-tenant streamable HTTP and single-user stdio."""
