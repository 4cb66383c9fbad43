from slowlog_csv.cli import main

raise SystemExit(main())
