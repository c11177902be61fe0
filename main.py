#!/usr/bin/env python3
"""RepTimer — entry point.

Run with:
    python main.py interval --work 40 --rest 20
    python -m reptimer breathe --preset "Box Breathing"
"""

from reptimer.__main__ import main


if __name__ == "__main__":
    main()
