"""
MCP entry point.

    python run_mcp_server.py                                  # stdio
    python run_mcp_server.py --transport streamable-http --port 8765
"""

from mipana.mcp.server import main

if __name__ == "__main__":
    main()
