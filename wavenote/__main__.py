from wavenote.dashboard.app import main

main()
