import sys

from audio_util.cli import main

sys.exit(main())
