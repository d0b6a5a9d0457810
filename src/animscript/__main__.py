import sys

from animscript.main import main

sys.exit(main())
