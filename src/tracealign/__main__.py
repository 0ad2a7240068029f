import sys

from tracealign.cli import main_cli

sys.exit(main_cli())
