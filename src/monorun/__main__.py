from monorun.cli.app import main

main()
