from nosy.cli.main import main

raise SystemExit(main())
