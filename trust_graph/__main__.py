import sys

from trust_graph.cli import main

sys.exit(main())
