from repokit.cli import main

main()
