from iwait.app import main

main()
