from modplan.cli import main

main()
