from deadfiles.cli import main

raise SystemExit(main())
