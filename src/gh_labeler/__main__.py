from gh_labeler.cli import main

raise SystemExit(main())
