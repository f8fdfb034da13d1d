#!/usr/bin/env python3
"""
PR Review Bot Server

Simple Flask server receiving GitHub pull_request webhooks.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from pr_review_bot.api import main


if __name__ == '__main__':
    main()
