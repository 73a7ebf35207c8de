import sys

from .ts2rpc import main

sys.exit(main())
