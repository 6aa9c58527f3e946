from kdlpy.cli import main

raise SystemExit(main())
