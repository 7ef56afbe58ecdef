from podforge.configurator import main

main()
