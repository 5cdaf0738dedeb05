"""Allow running pomocycle as a module: python -m pomocycle_cli."""

from pomocycle_cli.main import main

if __name__ == "__main__":
    main()
