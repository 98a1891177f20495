from merman.cli import main

raise SystemExit(main())
