from chromamask.cli import main

main()
