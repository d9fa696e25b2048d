from julienned.cli import main

main()
