from pitchmind.cli import main

main()
