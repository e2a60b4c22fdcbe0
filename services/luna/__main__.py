from luna.screen import main

main()
