"""Allow running as ``python -m dotfile_mirror``."""

from .cli import main

if __name__ == "__main__":
    main()
