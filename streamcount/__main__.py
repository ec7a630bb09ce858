"""Entry point: python -m streamcount"""

import sys

from streamcount.cli import main

sys.exit(main())
