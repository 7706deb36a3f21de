from hitcounter.app import main

main()
