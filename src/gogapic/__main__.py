import sys

from gogapic.cli import main

if __name__ == "__main__":
    sys.exit(main())
