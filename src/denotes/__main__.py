import sys

from denotes.cli import main

sys.exit(main())
