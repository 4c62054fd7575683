from proclite.app import main

main()
