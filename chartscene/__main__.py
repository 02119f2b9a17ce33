from chartscene.cli import main


raise SystemExit(main())
