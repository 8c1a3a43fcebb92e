import sys

from combo_engine.cli import main

sys.exit(main())
