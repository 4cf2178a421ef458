from cardatlas.app import main

raise SystemExit(main())
