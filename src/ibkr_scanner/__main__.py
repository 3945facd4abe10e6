"""Allow ``python -m ibkr_scanner``."""

from .cli import main

if __name__ == "__main__":
    main()
