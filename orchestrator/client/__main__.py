import sys

from orchestrator.client.cli import main

sys.exit(main())
