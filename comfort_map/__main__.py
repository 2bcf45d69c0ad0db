from comfort_map.cli import main

main()
