#!/usr/bin/env python3
"""
agent-environment module entry point
Allows running: python3 -m agentenv
"""

from agentenv.cli import main

if __name__ == '__main__':
    main()
