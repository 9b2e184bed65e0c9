#!/usr/bin/env python3
"""
Entry point for the simulation center planner.

Run with:
    streamlit run main.py
"""

import logging

from config.parameters import get_log_level
from ui.main import main

logging.basicConfig(level=get_log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

if __name__ == "__main__":
    main()
