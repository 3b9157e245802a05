from queuebot.twitch.main import main

main()
