"""Command-line interface."""
from shockglobe.main import main

if __name__ == "__main__":
    main()
