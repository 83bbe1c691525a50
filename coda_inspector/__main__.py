from coda_inspector.cli import main

raise SystemExit(main())
