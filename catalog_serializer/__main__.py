"""Package entry point for ``python -m catalog_serializer``.

Delegates to the CLI's main() and exits with its return code.
"""

import sys

from catalog_serializer.cli import main

if __name__ == "__main__":
    sys.exit(main())
