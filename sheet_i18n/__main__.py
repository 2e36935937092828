# sheet_i18n/__main__.py
import sys

from sheet_i18n.cli import main

if __name__ == "__main__":
    sys.exit(main())
