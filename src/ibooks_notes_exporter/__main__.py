import sys

from ibooks_notes_exporter.cli import main

sys.exit(main())
