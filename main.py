#!/usr/bin/env python3
"""SerenityBreath entry point.

Run with:
    python main.py
    python -m serenitybreath
"""

from serenitybreath.__main__ import main


if __name__ == "__main__":
    main()
