"""Allow running systop with ``python -m systop``."""

from systop.app import main

if __name__ == "__main__":
    main()
