from kubeconfig_patcher.cli import main

raise SystemExit(main())
