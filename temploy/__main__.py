from temploy.cli import main

raise SystemExit(main())
