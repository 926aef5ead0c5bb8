import sys

from tabular_cfr.cli import main

sys.exit(main())
