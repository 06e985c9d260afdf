import sys

from skydeck.cli import main

sys.exit(main())
