#!/usr/bin/env python3
"""Run the news dashboard MCP server over stdio."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from newsdash.server.app import main


if __name__ == "__main__":
    main()
