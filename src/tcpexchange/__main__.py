from tcpexchange.cli import main

raise SystemExit(main())
