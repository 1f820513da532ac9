import sys

from pepolicy.cli import main_cli

sys.exit(main_cli())
