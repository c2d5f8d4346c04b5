import sys

from reelorder.cli import main

sys.exit(main())
