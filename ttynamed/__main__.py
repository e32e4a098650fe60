import sys

from ttynamed.cli import main

sys.exit(main())
