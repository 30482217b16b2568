from trello2focalboard.cli import main

main()
