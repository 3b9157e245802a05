from queuebot.display.main import main

main()
