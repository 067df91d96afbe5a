"""Entry point for 'python -m academia' command."""

from academia.cli import main

if __name__ == "__main__":
    main()
