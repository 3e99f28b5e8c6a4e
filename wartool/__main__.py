import sys

from .wartool import main

sys.exit(main())
