"""Allow running the server as a module: python -m wujie_mcp."""

from wujie_mcp.runner import main

if __name__ == "__main__":
    main()
