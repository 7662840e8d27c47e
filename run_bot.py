#!/usr/bin/env python3
"""
Launcher for the What The Food admin bot
Run this from the root directory: python run_bot.py
(after `pip install -e .` the `whatthefood-admin` command does the same)
"""

from bot.main import run

if __name__ == "__main__":
    run()
