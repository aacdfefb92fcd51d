"""Entry point for 'python -m astrule' command."""

from astrule.cli import main

if __name__ == "__main__":
    main()
