"""Allow `python -m justify`."""

from justify.cli.main import main

if __name__ == "__main__":
    main()
