import sys

from invoice_mailer.cli import main

sys.exit(main())
