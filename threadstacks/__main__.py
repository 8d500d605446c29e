"""Allow running the package as a module: python -m threadstacks."""

import sys

from threadstacks.main import main

if __name__ == "__main__":
    sys.exit(main())
