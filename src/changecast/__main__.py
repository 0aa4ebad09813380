from changecast.cli import main

raise SystemExit(main())
