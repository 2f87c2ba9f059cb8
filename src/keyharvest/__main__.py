"""Allow running keyharvest with ``python -m keyharvest``."""

from .main import console_main

if __name__ == "__main__":
    console_main()
