from earth_power.run_earth import main

raise SystemExit(main())
