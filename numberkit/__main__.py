import sys

from numberkit.cli import main

sys.exit(main())
