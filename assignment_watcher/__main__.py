import sys

from assignment_watcher.main import main


sys.exit(main())
