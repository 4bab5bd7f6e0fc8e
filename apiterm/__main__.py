from apiterm.cli.main import main

main()
